'''Byte level helpers shared by the block modes and the XOR cracker:
encodings, XOR variants, hamming distance and random bytes. Everything
here takes and returns bytes.'''
import base64
import secrets
from crypto_errors import LengthMismatch


def bin_to_hex(bin_in):
    return bin_in.hex()

def hex_to_bin(hex_in):
    return bytes.fromhex(hex_in)

def base64_to_bin(base64_in):
    return base64.b64decode(base64_in)

def bin_to_base64(bin_in):
    '''base64 encode without the line breaks codecs would insert'''
    return base64.b64encode(bin_in).decode('ascii')

def hex_to_base64(hex_in):
    '''Convert a hex-encoded string to base64-encoded string '''
    return bin_to_base64(hex_to_bin(hex_in))

def fixed_xor(buf1, buf2):
    '''Takes two equal sized binary buffers and returns their XOR combination'''
    if len(buf1) != len(buf2):
        raise LengthMismatch(len(buf1), len(buf2))
    return bytes([byte_x ^ byte_y for byte_x, byte_y in zip(buf1, buf2)])

def xor_single_byte(buf, key_byte):
    return bytes([byte ^ key_byte for byte in buf])

def repeating_key_xor(buf, key):
    '''XORs buf against key repeated out to the length of buf. Encrypts
    and decrypts.'''
    if not key:
        raise ValueError("key must not be empty")
    return bytes([byte ^ key[i % len(key)] for i, byte in enumerate(buf)])

def calculate_num_bits_table():
    '''maps every byte value to the number of 1 bits in it'''
    table = []
    for value in range(256):
        num_bits = 0
        for bit in range(8):
            if value & (1 << bit):
                num_bits += 1
        table.append(num_bits)
    return table

NUM_BITS_TABLE = calculate_num_bits_table()

def hamming_distance(bin1, bin2, num_bits_table=NUM_BITS_TABLE):
    '''returns the number of differing bits between two equal sized buffers'''
    if len(bin1) != len(bin2):
        raise LengthMismatch(len(bin1), len(bin2))
    return sum(num_bits_table[byte1 ^ byte2] for byte1, byte2 in zip(bin1, bin2))

def blockify(buf, blocksize=16):
    return [buf[i:i+blocksize] for i in range(0, len(buf), blocksize)]

def read_base64_file(path):
    '''decodes a file of base64, one or more lines of it'''
    bin_blob = b''
    with open(path) as base64_file:
        for line in base64_file:
            bin_blob += base64_to_bin(line)
    return bin_blob

def random_bytes(nbytes):
    return secrets.token_bytes(nbytes)

def generate_random_key(nbytes=16):
    return random_bytes(nbytes)


if __name__ == '__main__':
    print('Hex to base64')
    print(hex_to_base64(
        '49276d206b696c6c696e6720796f757220627261696e2'
        '06c696b65206120706f69736f6e6f7573206d757368726f6f6d'
    ))

    print('Fixed XOR')
    print(bin_to_hex(fixed_xor(hex_to_bin('1c0111001f010100061a024b53535009181c'),
                               hex_to_bin('686974207468652062756c6c277320657965'))))

    print('Repeating key XOR')
    print(bin_to_hex(repeating_key_xor(
        b"Burning 'em, if you ain't quick and nimble\nI go crazy when I hear a cymbal", b'ICE')))

    print('Hamming distance')
    print(hamming_distance(b'this is a test', b'wokka wokka!!!'))
