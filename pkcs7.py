'''PKCS#7 padding. unpad is strict: anything other than n trailing bytes
of value n, with 1 <= n <= block size, is rejected.'''
from crypto_errors import InvalidPadding

def pad(input_bytes, block_length=16):
    '''pad the input bytes according to pkcs#7 to an
    even multiple of the block length given. Aligned input
    gets a whole block of padding.'''
    if not 1 <= block_length <= 255:
        raise ValueError(f"block length must be between 1 and 255, got {block_length}")
    padding_to_add = block_length - len(input_bytes) % block_length
    return input_bytes + bytes([padding_to_add]) * padding_to_add

def unpad(padded_bytes, block_length=16):
    '''strips pkcs#7 padding, raising InvalidPadding if it is malformed'''
    if not padded_bytes:
        raise InvalidPadding(b'', 0)
    last_byte = padded_bytes[-1]
    suffix = padded_bytes[-last_byte:] if last_byte else b''
    if (last_byte == 0 or last_byte > block_length or last_byte > len(padded_bytes)
            or suffix != bytes([last_byte]) * last_byte):
        raise InvalidPadding(suffix, last_byte)
    return padded_bytes[:-last_byte]

def has_valid_padding(padded_bytes, block_length=16):
    '''The check a padding oracle exposes: True when unpad would succeed'''
    try:
        unpad(padded_bytes, block_length)
    except InvalidPadding:
        return False
    return True


if __name__ == '__main__':
    print('PKCS#7 padding')
    print(pad(b'YELLOW SUBMARINE', 20))
    print(unpad(b'ICE ICE BABY\x04\x04\x04\x04'))
    print(has_valid_padding(b'ICE ICE BABY\x05\x05\x05\x05'))
