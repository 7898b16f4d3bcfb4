#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""FARC archive writing (hash-indexed tables only).

output layout:
  0x00   0x80-byte FARC header (sir0 type 5)
  0x80   SIR0 block: reserved SIR0 header, file table, table header, pointer list
  ...    zero padding up to a multiple of 0x100
  data   every file sorted by hash, each padded to a multiple of 0x10
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'

__all__ = ['FarcWriter']

#######################################################################################

import io, logging, os
from struct import pack
from typing import BinaryIO, Dict, List, Optional, Union

from ..crypt import hash32
from .errors import FarcTooLargeError
from .farcfile import FarcFile
from .sir0 import HEADER_SIZE as SIR0_HEADER_SIZE, write_sir0_footer, write_sir0_header
from ..util.typecast import unsigned_I


logger = logging.getLogger(__name__)


def _u32(what:str, value:int) -> int:
    try:
        return unsigned_I(value)
    except OverflowError:
        raise FarcTooLargeError(what, value) from None

def _padding(position:int, align:int) -> bytes:
    return bytes(-position % align)


class FarcWriter:
    """FarcWriter(files:Dict[int,bytes]=None)

    content of a FARC file to be written. only hash-indexed archives can be
    created, names are hashed when added.
    """
    SIR0_TYPE:int = 5
    SIR0_OFFSET:int = 0x80
    DATA_ALIGN:int = 0x100
    STORAGE_ALIGN:int = 0x10
    META_ALIGN:int = 0x10
    # the declared data length always exceeds the stored data by this much
    DATA_LENGTH_EXTRA:int = 112
    # header bytes 0x04-0x20, no known meaning
    _HEADER_UNKNOWN:bytes = pack('<IIIIII', 0, 0, 2, 0, 0, 7) + bytes((0xA4, 0x3C, 0xEA, 0x77))

    def __init__(self, files:Optional[Dict[int,bytes]]=None):
        self.hashed_files = {}  # type: Dict[int, bytes]
        if files is not None:
            for hash, content in files.items():
                self.add_hashed_file(hash, content)

    def __len__(self) -> int:
        return len(self.hashed_files)

    def __contains__(self, hash:int) -> bool:
        return hash in self.hashed_files

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} files={len(self.hashed_files)}>'

    @classmethod
    def from_farc(cls, farc:FarcFile) -> 'FarcWriter':
        """Create a new FarcWriter holding a copy of every file of an open archive"""
        writer = cls()
        for hash in farc.iter_hashes():
            with farc.get_hashed_file(hash) as file:
                writer.add_hashed_file(hash, file.read())
        return writer

    def add_hashed_file(self, hash:int, content:bytes):
        """Add (or replace) a file to be written with the given name hash"""
        if not isinstance(content, (bytes, bytearray, memoryview)):
            raise TypeError(f'file content must be bytes-like, not {content.__class__.__name__}')
        self.hashed_files[hash] = bytes(content)

    def add_named_file(self, name:str, content:bytes) -> int:
        """Add (or replace) a file under hash32(name), returns the hash"""
        hash = hash32(name)
        self.add_hashed_file(hash, content)
        return hash

    #region ## WRITE FUNCTIONS ##

    def save(self, filename:Union[str,os.PathLike]):
        with open(filename, 'wb') as file:
            self.write_hashed(file)

    def write_hashed(self, writer:BinaryIO):
        """Write a hash-indexed FARC file with the content of this object"""
        # sorted by hash, the game does a binary search on the table
        hash_sorted = sorted(self.hashed_files.items())

        storage_file = io.BytesIO()
        meta_file = io.BytesIO()
        meta_file.write(bytes(SIR0_HEADER_SIZE))  # reserve sir0 header space
        meta_pointers = [4, 8]  # type: List[int]

        for file_hash, file_content in hash_sorted:
            file_start = storage_file.tell()
            file_length = len(file_content)
            storage_file.write(file_content)
            storage_file.write(_padding(storage_file.tell(), self.STORAGE_ALIGN))
            meta_file.write(pack('<III', _u32('file hash', file_hash),
                                         _u32('file start', file_start),
                                         _u32('file length', file_length)))

        meta_file.write(_padding(meta_file.tell(), self.META_ALIGN))

        sir0_header_position = _u32('sir0 header position', meta_file.tell())
        meta_pointers.append(sir0_header_position)
        meta_file.write(pack('<III', SIR0_HEADER_SIZE,  # the start of the file table
                                     _u32('file count', len(hash_sorted)),
                                     FarcFile.TABLE_BY_HASH))
        meta_file.write(_padding(meta_file.tell(), self.META_ALIGN))

        sir0_footer_position = _u32('sir0 footer position', meta_file.tell())
        write_sir0_footer(meta_file, meta_pointers)
        meta_file.write(_padding(meta_file.tell(), self.META_ALIGN))

        meta_file.seek(0)
        write_sir0_header(meta_file, sir0_header_position, sir0_footer_position)

        meta_data = meta_file.getvalue()
        storage_data = storage_file.getvalue()
        meta_length = _u32('sir0 length', len(meta_data))
        storage_length = _u32('data length', len(storage_data) + self.DATA_LENGTH_EXTRA)
        no_padding_storage_start = self.SIR0_OFFSET + meta_length
        storage_padding = _padding(no_padding_storage_start, self.DATA_ALIGN)
        storage_start = _u32('data offset', no_padding_storage_start + len(storage_padding))
        logger.debug('writing FARC: %d files, sir0 0x%x bytes, data at 0x%x (0x%x bytes)',
                     len(hash_sorted), meta_length, storage_start, len(storage_data))

        header = pack('<4s28sIIIII', FarcFile.MAGIC, self._HEADER_UNKNOWN, self.SIR0_TYPE,
                      self.SIR0_OFFSET, meta_length, storage_start, storage_length)
        writer.write(header)
        writer.write(_padding(len(header), self.SIR0_OFFSET))
        writer.write(meta_data)
        writer.write(storage_padding)
        writer.write(storage_data)

    #endregion
