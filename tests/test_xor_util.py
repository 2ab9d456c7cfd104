import pytest

from crypto_errors import LengthMismatch
from xor_util import (
    base64_to_bin, bin_to_base64, bin_to_hex, blockify, calculate_num_bits_table,
    fixed_xor, generate_random_key, hamming_distance, hex_to_base64, hex_to_bin,
    random_bytes, read_base64_file, repeating_key_xor, xor_single_byte,
)


def test_hex_to_base64():
    assert hex_to_base64(
        '49276d206b696c6c696e6720796f757220627261696e2'
        '06c696b65206120706f69736f6e6f7573206d757368726f6f6d'
    ) == 'SSdtIGtpbGxpbmcgeW91ciBicmFpbiBsaWtlIGEgcG9pc29ub3VzIG11c2hyb29t'


def test_base64_has_no_line_breaks():
    encoded = bin_to_base64(b'\xff' * 100)
    assert '\n' not in encoded
    assert base64_to_bin(encoded) == b'\xff' * 100


def test_hex_round_trip():
    assert bin_to_hex(b'\x00\x10\xab') == '0010ab'
    assert hex_to_bin('0010ab') == b'\x00\x10\xab'


def test_fixed_xor_known_vector():
    result = fixed_xor(hex_to_bin('1c0111001f010100061a024b53535009181c'),
                       hex_to_bin('686974207468652062756c6c277320657965'))
    assert bin_to_hex(result) == '746865206b696420646f6e277420706c6179'


def test_fixed_xor_is_self_inverse():
    buf1 = b'attack at dawn!!'
    buf2 = b'YELLOW SUBMARINE'
    assert fixed_xor(fixed_xor(buf1, buf2), buf2) == buf1


def test_fixed_xor_empty():
    assert fixed_xor(b'', b'') == b''


def test_fixed_xor_length_mismatch():
    with pytest.raises(LengthMismatch) as excinfo:
        fixed_xor(b'abc', b'abcd')
    assert excinfo.value.len1 == 3
    assert excinfo.value.len2 == 4


def test_hamming_distance_known_vector():
    assert hamming_distance(b'this is a test', b'wokka wokka!!!') == 37


def test_hamming_distance_identical_is_zero():
    assert hamming_distance(b'same', b'same') == 0


def test_hamming_distance_length_mismatch():
    with pytest.raises(LengthMismatch):
        hamming_distance(b'abc', b'abcd')


def test_hamming_distance_length_mismatch_is_a_value_error():
    with pytest.raises(ValueError):
        hamming_distance(b'a', b'')


def test_num_bits_table():
    table = calculate_num_bits_table()
    assert len(table) == 256
    assert table[0] == 0
    assert table[0xff] == 8
    assert table[0b10100101] == 4
    assert all(table[value] == bin(value).count('1') for value in range(256))


def test_repeating_key_xor_known_vector():
    plaintext = b"Burning 'em, if you ain't quick and nimble\nI go crazy when I hear a cymbal"
    assert bin_to_hex(repeating_key_xor(plaintext, b'ICE')) == (
        '0b3637272a2b2e63622c2e69692a23693a2a3c6324202d623d63343c2a26226324272765272a282b2f20'
        '430a652e2c652a3124333a653e2b2027630c692b20283165286326302e27282f')


def test_repeating_key_xor_decrypts_itself():
    ciphertext = repeating_key_xor(b'hello there', b'key')
    assert repeating_key_xor(ciphertext, b'key') == b'hello there'


def test_repeating_key_xor_rejects_empty_key():
    with pytest.raises(ValueError):
        repeating_key_xor(b'data', b'')


def test_xor_single_byte():
    assert xor_single_byte(b'\x00\x01\xff', 0x01) == b'\x01\x00\xfe'


def test_blockify_keeps_partial_block():
    assert blockify(b'abcdefgh', 3) == [b'abc', b'def', b'gh']


def test_random_bytes():
    assert len(random_bytes(7)) == 7
    assert len(generate_random_key()) == 16


def test_read_base64_file(tmp_path):
    path = tmp_path / 'cipher.txt'
    path.write_text(bin_to_base64(b'first line ') + '\n' + bin_to_base64(b'second line') + '\n')
    assert read_base64_file(path) == b'first line second line'
