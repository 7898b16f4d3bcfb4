import io
import struct

import pytest

from conftest import NAMED_FILES, build_farc
from pmd.archive import FarcFile, FarcWriter
from pmd.archive.errors import FarcTooLargeError, HashedFileNotFoundError
from pmd.crypt import hash32


def _write(writer):
    buf = io.BytesIO()
    writer.write_hashed(buf)
    return buf.getvalue()


def test_single_file_layout():
    writer = FarcWriter()
    writer.add_hashed_file(0x12345678, b'hi')
    data = _write(writer)

    header = (b'FARC' + struct.pack('<IIIIII', 0, 0, 2, 0, 0, 7) + b'\xa4\x3c\xea\x77'
              + struct.pack('<IIIII', 5, 0x80, 0x40, 0x100, 16 + 112))
    sir0 = (b'SIR0' + struct.pack('<III', 0x20, 0x30, 0)       # 0x00 sir0 header
            + struct.pack('<III', 0x12345678, 0, 2) + bytes(4)  # 0x10 file table
            + struct.pack('<III', 0x10, 1, 1) + bytes(4)        # 0x20 table header
            + b'\x04\x04\x18\x00' + bytes(12))                  # 0x30 pointer list
    expected = header + bytes(0x80 - len(header)) + sir0 + bytes(0x40) + b'hi' + bytes(14)

    assert len(data) == 0x110
    assert data == expected


def test_single_file_round_trip():
    writer = FarcWriter({0x12345678: b'hi'})

    with FarcFile(io.BytesIO(_write(writer))) as farc:
        assert farc.file_count() == 1
        assert farc.get_hashed_file(0x12345678).read() == b'hi'
        with pytest.raises(HashedFileNotFoundError):
            farc.get_hashed_file(0x0)


def test_empty_archive():
    data = _write(FarcWriter())

    assert len(data) == 0x100
    with FarcFile(io.BytesIO(data)) as farc:
        assert farc.file_count() == 0


def test_alignment_and_order():
    writer = FarcWriter()
    contents = {0x30: b'a' * 17, 0x10: b'b' * 16, 0x20: b'c', 0x05: b''}
    for hash, content in contents.items():
        writer.add_hashed_file(hash, content)
    data = _write(writer)

    sir0_length, all_data_offset = struct.unpack_from('<II', data, 0x28)
    assert all_data_offset % 0x100 == 0
    assert all_data_offset >= 0x80 + sir0_length
    with FarcFile(io.BytesIO(data)) as farc:
        assert list(farc.iter_hashes()) == sorted(contents)
        starts = [e.start for e in farc.infolist()]
        assert all(start % 16 == 0 for start in starts)
        assert starts == sorted(starts)
        for hash, content in contents.items():
            assert farc.read(hash) == content


def test_output_is_deterministic():
    first = FarcWriter({3: b'three', 1: b'one', 2: b'two'})
    second = FarcWriter()
    for hash, content in ((2, b'two'), (1, b'one'), (3, b'three')):
        second.add_hashed_file(hash, content)

    assert _write(first) == _write(second)


def test_round_trip_from_named_archive():
    with FarcFile(io.BytesIO(build_farc(NAMED_FILES))) as farc:
        writer = FarcWriter.from_farc(farc)
        originals = {hash: farc.get_hashed_file(hash).read() for hash in farc.iter_hashes()}

    assert len(writer) == len(NAMED_FILES)
    with FarcFile(io.BytesIO(_write(writer))) as farc:
        assert farc.file_count() == len(NAMED_FILES)
        assert farc.known_name_count() == 0
        for hash, content in originals.items():
            assert farc.get_hashed_file(hash).read() == content
        assert farc.check_file_names(name for name, _ in NAMED_FILES) == len(NAMED_FILES)
        for name, content in NAMED_FILES:
            assert farc.get_named_file(name).read() == content


def test_rewrite_is_stable():
    writer = FarcWriter({hash32(name): content for name, content in NAMED_FILES})
    data = _write(writer)
    with FarcFile(io.BytesIO(data)) as farc:
        assert _write(FarcWriter.from_farc(farc)) == data


def test_add_named_file():
    writer = FarcWriter()
    hash = writer.add_named_file('common.bin', b'data')

    assert hash == hash32('common.bin')
    assert hash in writer
    with FarcFile(io.BytesIO(_write(writer))) as farc:
        assert farc.get_named_file('common.bin').read() == b'data'


def test_hash_too_large():
    writer = FarcWriter({0x100000000: b'data'})
    with pytest.raises(FarcTooLargeError) as excinfo:
        _write(writer)
    assert isinstance(excinfo.value, OverflowError)
    assert excinfo.value.value == 0x100000000


def test_save(tmp_path):
    path = tmp_path / 'out.bin'
    FarcWriter({1: b'one'}).save(path)

    with FarcFile(path) as farc:
        assert farc.read(1) == b'one'


def test_add_rejects_non_bytes():
    writer = FarcWriter()
    with pytest.raises(TypeError):
        writer.add_hashed_file(1, 5)
    with pytest.raises(TypeError):
        writer.add_named_file('common.bin', 'text')
    assert len(writer) == 0

    writer.add_hashed_file(2, bytearray(b'ab'))
    writer.add_hashed_file(3, memoryview(b'cd'))
    assert writer.hashed_files == {2: b'ab', 3: b'cd'}
