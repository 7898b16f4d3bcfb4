#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""SIR0 relocatable data container reading and writing.

layout:
  0x0  b'SIR0'
  0x4  u32 header offset   (start of the embedded format's own header)
  0x8  u32 pointer offset  (start of the encoded pointer list, end of the header)
  0xC  u32 zero

the pointer list stores the offset of every pointer in the container as the
difference from the previous one, in big-endian 7-bit groups (high bit set on all
groups but the last), and ends with a 0x00 byte.
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'

__all__ = ['Sir0', 'write_sir0_footer', 'write_sir0_header', 'encode_pointer_offsets', 'decode_pointer_offsets']

#######################################################################################

import io
from struct import calcsize, pack, unpack
from typing import BinaryIO, Iterable, List

from .errors import Sir0Error
from .partition import read_exact
from ..util.typecast import UINT32_MAX


MAGIC:bytes = b'SIR0'
_HEADER_FMT:str = '<4sIII'
HEADER_SIZE:int = calcsize(_HEADER_FMT)  # 0x10


#region ## POINTER LIST ENCODING ##

def encode_pointer_offsets(pointers:Iterable[int]) -> bytes:
    """encode_pointer_offsets([4, 8, 32]) -> b'\\x04\\x04\\x18\\x00'
    """
    buf = bytearray()
    last = 0
    for pointer in pointers:
        if pointer > UINT32_MAX:
            raise Sir0Error(f'pointer offset 0x{pointer:x} does not fit in a u32 integer')
        delta = pointer - last
        if delta <= 0:
            raise Sir0Error(f'pointer offsets must be strictly increasing, got 0x{pointer:x} after 0x{last:x}')
        groups = []
        while True:
            groups.append(delta & 0x7f)
            delta >>= 7
            if not delta:
                break
        buf.extend(g | 0x80 for g in reversed(groups[1:]))
        buf.append(groups[0])
        last = pointer
    buf.append(0)  # terminator
    return bytes(buf)

def decode_pointer_offsets(data:bytes) -> List[int]:
    """decode_pointer_offsets(b'\\x04\\x04\\x18\\x00') -> [4, 8, 32]
    """
    offsets = []  # type: List[int]
    last = value = 0
    pending = False
    for b in data:
        value = (value << 7) | (b & 0x7f)
        if b & 0x80:
            pending = True
            continue
        if not pending and not value:
            return offsets
        last += value
        offsets.append(last)
        value = 0
        pending = False
    raise Sir0Error('the sir0 pointer list is not terminated')

#endregion

#region ## READING ##

class Sir0:
    """Sir0(file:BinaryIO)

    decoded SIR0 container. `file` is kept as the payload stream:
    offsets stored inside the container are relative to its start.
    """
    __slots__ = ('header_offset', 'pointer_offset', 'header', 'offsets', 'file')

    def __init__(self, file:BinaryIO):
        file.seek(0)
        magic, header_offset, pointer_offset, _ = unpack(_HEADER_FMT, read_exact(file, HEADER_SIZE, 'sir0 header'))
        if magic != MAGIC:
            raise Sir0Error(f'invalid SIR0 magic: {magic!r}')
        size = file.seek(0, io.SEEK_END)
        if header_offset > pointer_offset:
            raise Sir0Error(f'the sir0 header offset (0x{header_offset:x}) is after the pointer list (0x{pointer_offset:x})')
        if pointer_offset > size:
            raise Sir0Error(f'the sir0 pointer list offset (0x{pointer_offset:x}) is out of the container (size 0x{size:x})')

        file.seek(header_offset)
        self.header_offset = header_offset
        self.pointer_offset = pointer_offset
        self.header = read_exact(file, pointer_offset - header_offset, 'sir0 header data')  # type: bytes
        self.offsets = decode_pointer_offsets(file.read())  # type: List[int]
        file.seek(0)
        self.file = file

    def __repr__(self) -> str:
        return (f'{self.__class__.__name__}(header_offset=0x{self.header_offset:x}, '
                f'pointer_offset=0x{self.pointer_offset:x}, pointers={len(self.offsets)})')

    def get_header(self) -> bytes:
        return self.header

    def get_file(self) -> BinaryIO:
        return self.file

#endregion

#region ## WRITING ##

def write_sir0_footer(writer:BinaryIO, pointers:Iterable[int]) -> int:
    """write the encoded pointer list at the current position of writer"""
    return writer.write(encode_pointer_offsets(pointers))

def write_sir0_header(writer:BinaryIO, header_pos:int, footer_pos:int) -> int:
    """write the 16-byte SIR0 header at the current position of writer"""
    for what, value in (('header', header_pos), ('pointer list', footer_pos)):
        if not 0 <= value <= UINT32_MAX:
            raise Sir0Error(f'the sir0 {what} offset 0x{value:x} does not fit in a u32 integer')
    return writer.write(pack(_HEADER_FMT, MAGIC, header_pos, footer_pos, 0))

#endregion
