import io
import struct

import pytest

from pmd.archive import FarcFile
from pmd.archive.sir0 import write_sir0_footer, write_sir0_header


def _pad(buf, align):
    buf.write(bytes(-buf.tell() % align))


def build_farc(files, table_kind=0, sir0_type=4, magic=b'FARC',
               table_header=None, pad_header=True, all_data_offset=None):
    """Build FARC bytes the way the game files are laid out.

    `files` is a list of (key, content): key is a name (str, or raw UTF-16LE
    bytes without terminator) for table_kind 0, a hash for table_kind 1.
    """
    sir0 = io.BytesIO()
    sir0.write(bytes(16))
    table_pos = sir0.tell()
    sir0.write(bytes(12 * len(files)))

    keys = []
    for key, _ in files:
        if table_kind == 0:
            keys.append(sir0.tell())
            raw = key.encode('utf-16-le') if isinstance(key, str) else key
            sir0.write(raw + b'\x00\x00')
        else:
            keys.append(key)
    _pad(sir0, 16)

    header_pos = sir0.tell()
    if table_header is None:
        table_header = struct.pack('<III', table_pos, len(files), table_kind)
    sir0.write(table_header)
    if pad_header:
        _pad(sir0, 16)
    footer_pos = sir0.tell()
    write_sir0_footer(sir0, [4, 8, header_pos])
    _pad(sir0, 16)

    data = io.BytesIO()
    sir0.seek(table_pos)
    for key, (_, content) in zip(keys, files):
        sir0.write(struct.pack('<III', key, data.tell(), len(content)))
        data.write(content)
        _pad(data, 16)
    sir0.seek(0)
    write_sir0_header(sir0, header_pos, footer_pos)

    sir0_data = sir0.getvalue()
    data_bytes = data.getvalue()
    if all_data_offset is None:
        all_data_offset = 0x80 + len(sir0_data)
    header = struct.pack('<4s28sIIIII', magic, bytes(28), sir0_type,
                         0x80, len(sir0_data), all_data_offset, len(data_bytes))
    return header + bytes(0x80 - len(header)) + sir0_data + data_bytes


NAMED_FILES = [
    ('common.bin', b'common message data'),
    ('dungeon.bin', b'\x00\x01\x02\x03' * 10),
    ('ポケモン.bin', b'pokemon'),
    ('empty.bin', b''),
]

HASHED_FILES = [
    (0xdeadbeef, b'first'),
    (0x00000001, b'second, a bit longer than sixteen bytes'),
    (0x12345678, b'hi'),
]


@pytest.fixture
def named_farc_bytes():
    return build_farc(NAMED_FILES, table_kind=0)


@pytest.fixture
def hashed_farc_bytes():
    return build_farc(HASHED_FILES, table_kind=1, sir0_type=5)


@pytest.fixture
def named_farc(named_farc_bytes):
    with FarcFile(io.BytesIO(named_farc_bytes)) as farc:
        yield farc


@pytest.fixture
def hashed_farc(hashed_farc_bytes):
    with FarcFile(io.BytesIO(hashed_farc_bytes)) as farc:
        yield farc
