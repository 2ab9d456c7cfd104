'''CBC and ECB built by hand on top of a single block AES transform.
The only thing taken from pycryptodome is AES applied to exactly one
16 byte block; chaining and padding happen here. The block functions
can be swapped out for any keyed 16 byte permutation.'''
import logging
from Crypto.Cipher import AES
from crypto_errors import InvalidKeySize, InvalidLength
from pkcs7 import pad, unpad
from xor_util import fixed_xor, blockify

logger = logging.getLogger(__name__)

BLOCK_SIZE = 16
KEY_SIZE = 16


def _check_key(aes_key):
    if len(aes_key) != KEY_SIZE:
        raise InvalidKeySize(f"key must be size {KEY_SIZE}, got {len(aes_key)}")

def _check_block(block):
    if len(block) != BLOCK_SIZE:
        raise InvalidLength(f"block must be size {BLOCK_SIZE}, got {len(block)}")

def _check_iv(iv):
    if len(iv) != BLOCK_SIZE:
        raise InvalidLength(f"iv must be size {BLOCK_SIZE}, got {len(iv)}")

def _check_ciphertext(cipher_blob):
    if len(cipher_blob) % BLOCK_SIZE != 0:
        raise InvalidLength(
            f"ciphertext size must be a multiple of {BLOCK_SIZE}, got {len(cipher_blob)}")

def aes_encrypt_block(aes_key, block):
    _check_key(aes_key)
    _check_block(block)
    return AES.new(aes_key, AES.MODE_ECB).encrypt(block)

def aes_decrypt_block(aes_key, block):
    _check_key(aes_key)
    _check_block(block)
    return AES.new(aes_key, AES.MODE_ECB).decrypt(block)

def cbc_encrypt(plaintext_blob, aes_key, iv, encrypt_block=aes_encrypt_block):
    '''encrypts plaintext in CBC mode. The iv is not part of the output'''
    _check_key(aes_key)
    _check_iv(iv)
    ciphertext = []
    to_xor = iv
    for block in blockify(pad(plaintext_blob, BLOCK_SIZE), BLOCK_SIZE):
        encrypted = encrypt_block(aes_key, fixed_xor(block, to_xor))
        ciphertext.append(encrypted)
        to_xor = encrypted
    return b''.join(ciphertext)

def cbc_decrypt(cipher_blob, aes_key, iv, decrypt_block=aes_decrypt_block):
    '''decrypts ciphertext in CBC mode and strips the padding.
    P[i] = D_k(C[i]) ^ C[i-1], with C[-1] being the iv'''
    _check_key(aes_key)
    _check_iv(iv)
    _check_ciphertext(cipher_blob)
    plaintext = []
    to_xor = iv
    for block in blockify(cipher_blob, BLOCK_SIZE):
        plaintext.append(fixed_xor(decrypt_block(aes_key, block), to_xor))
        to_xor = block
    return unpad(b''.join(plaintext), BLOCK_SIZE)

def ecb_encrypt(plaintext_blob, aes_key, encrypt_block=aes_encrypt_block):
    _check_key(aes_key)
    padded = pad(plaintext_blob, BLOCK_SIZE)
    return b''.join(encrypt_block(aes_key, block) for block in blockify(padded, BLOCK_SIZE))

def ecb_decrypt(cipher_blob, aes_key, decrypt_block=aes_decrypt_block):
    _check_key(aes_key)
    _check_ciphertext(cipher_blob)
    decrypted = b''.join(decrypt_block(aes_key, block) for block in blockify(cipher_blob, BLOCK_SIZE))
    return unpad(decrypted, BLOCK_SIZE)

def count_repeated_blocks(cipher_blob, block_size=BLOCK_SIZE):
    '''Splits the cipher blob given into block sized chunks and counts how
    many of them are repeats. ECB encrypts equal plaintext blocks to equal
    ciphertext blocks, so repeats point at ECB.'''
    chunks = blockify(cipher_blob, block_size)
    return len(chunks) - len(set(chunks))

def detect_aes_mode(blackbox):
    '''This function takes in a encryption function and determines
    what mode of AES it is using'''
    ciphertext = blackbox(b'\x00' * BLOCK_SIZE * 16)
    repeats = count_repeated_blocks(ciphertext)
    logger.debug("%d repeated blocks in %d bytes of ciphertext", repeats, len(ciphertext))
    if repeats > 0:
        return 'ecb'
    return 'cbc'


if __name__ == '__main__':
    from xor_util import generate_random_key

    aes_key = b'YELLOW SUBMARINE'
    iv = b'\x00' * BLOCK_SIZE

    print('CBC mode')
    ciphertext = cbc_encrypt(b"I'm back and I'm ringin' the bell", aes_key, iv)
    print(ciphertext.hex())
    print(cbc_decrypt(ciphertext, aes_key, iv))

    print('ECB mode')
    ciphertext = ecb_encrypt(b'YELLOW SUBMARINE' * 2, aes_key)
    print(ciphertext.hex())
    print(ecb_decrypt(ciphertext, aes_key))

    print('Mode detection')
    random_key = generate_random_key()
    print(detect_aes_mode(lambda blob: ecb_encrypt(blob, random_key)))
    print(detect_aes_mode(lambda blob: cbc_encrypt(blob, random_key, generate_random_key())))
