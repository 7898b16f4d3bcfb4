import pytest

from pmd.crypt import CRC32_TABLE, hash32, to_hash32


def _reference_crc32(data):
    value = 0xffffffff
    for o in data:
        value = (value >> 8) ^ CRC32_TABLE[(value ^ o) & 0xff]
    return value ^ 0xffffffff


def test_hash32_check_values():
    """bytes are hashed as-is with the IEEE CRC-32."""
    assert hash32(b'') == 0x00000000
    assert hash32(b'123456789') == 0xcbf43926
    assert hash32(b'The quick brown fox jumps over the lazy dog') == 0x414fa339


def test_hash32_empty_name():
    assert hash32('') == 0


def test_hash32_encodes_utf16le():
    assert hash32('abc') == hash32(b'a\x00b\x00c\x00')
    assert hash32('ポケモン') == hash32('ポケモン'.encode('utf-16-le'))
    # no byte-order mark, no terminator
    assert hash32('abc') != hash32('abc'.encode('utf-16'))
    assert hash32('abc') != hash32(b'a\x00b\x00c\x00\x00\x00')


@pytest.mark.parametrize('name', ['common.bin', 'message_en.bin', 'ポケモン.bin', 'a', 'x' * 300])
def test_hash32_matches_table_crc(name):
    assert hash32(name) == _reference_crc32(name.encode('utf-16-le'))


def test_hash32_is_deterministic():
    assert hash32('dungeon.bin') == hash32('dungeon.bin')
    assert 0 <= hash32('dungeon.bin') <= 0xffffffff


def test_to_hash32():
    assert to_hash32('common.bin') == hash32('common.bin')
    assert to_hash32(0x12345678) == 0x12345678
    assert to_hash32(-1) == 0xffffffff


def test_hash32_reference_names():
    # CRC-32 of the UTF-16LE bytes, computed outside of this package
    assert hash32('common.bin') == 0x14989de1
    assert hash32('dungeon.bin') == 0xe149b183
