#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""Independent read/seek windows over one shared, lock-guarded file object.
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'
__credits__ = '''Implementation designed mostly copied from CPython zipfile.py'''

__all__ = ['read_exact', 'SharedFile', 'Partition']

#######################################################################################

import io, threading
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from .errors import FarcError, PartitionError, PoisonedError, TruncatedError


def read_exact(reader:BinaryIO, size:int, what:str) -> bytes:
    """read_exact(reader, 12, 'table entry') -> bytes of length 12

    raises TruncatedError when fewer bytes are available.
    """
    data = reader.read(size)
    if len(data) != size:
        raise TruncatedError(what, size, len(data))
    return data


class SharedFile:
    """SharedFile(file:BinaryIO, close_file:bool=False)

    reference-counted owner of a seekable binary file object.
    every physical access goes through `locked()`, so all Partitions
    sharing it are serialized against each other.
    """
    def __init__(self, file:BinaryIO, close_file:bool=False):
        self._file = file
        self._close_file = close_file
        self._lock = threading.RLock()
        self._refcnt = 1
        self._poisoned = False

    def __repr__(self) -> str:
        state = ' [poisoned]' if self._poisoned else (' [closed]' if self._file is None else '')
        return f'<{self.__class__.__name__} refs={self._refcnt}{state}>'

    @property
    def closed(self) -> bool:
        return self._file is None

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @contextmanager
    def locked(self) -> Iterator[BinaryIO]:
        """with shared.locked() as file: ...

        OSError and FarcError propagate as-is, anything else raised while the
        lock is held poisons the shared file.
        """
        with self._lock:
            if self._poisoned:
                raise PoisonedError()
            if self._file is None:
                raise ValueError("I/O operation on closed archive file.")
            try:
                yield self._file
            except (OSError, FarcError):
                raise
            except BaseException:
                self._poisoned = True
                raise

    def size(self) -> int:
        with self.locked() as file:
            return file.seek(0, io.SEEK_END)

    def read_at(self, offset:int, n:int) -> bytes:
        """read up to n bytes at absolute offset"""
        with self.locked() as file:
            file.seek(offset)
            return file.read(n)

    def acquire(self) -> 'SharedFile':
        with self._lock:
            if self._file is None:
                raise ValueError("I/O operation on closed archive file.")
            self._refcnt += 1
        return self

    def release(self):
        with self._lock:
            assert self._refcnt > 0
            self._refcnt -= 1
            if not self._refcnt:
                file = self._file
                self._file = None
                if self._close_file and file is not None:
                    file.close()


class Partition(io.BufferedIOBase):
    """Partition(shared:SharedFile, offset:int, length:int, name:str=None)

    file-like object for reading the byte range [offset, offset+length) of a SharedFile.
    it keeps its own cursor; each read re-seeks the shared file before reading.
    """
    _shared = None  # Set here since close() checks it

    def __init__(self, shared:SharedFile, offset:int, length:int, name:str=None):
        if offset < 0 or length < 0:
            raise PartitionError(offset, length, 0)
        size = shared.size()
        if offset + length > size:
            raise PartitionError(offset, length, size)
        self._shared = shared.acquire()
        self._start = offset
        self._size = length
        self._pos = 0
        self.name = name
        self.mode = 'rb'

    def __repr__(self):
        result = [f'<{self.__class__.__name__}']
        if not self.closed:
            result.append(f' name={self.name!r} start=0x{self._start:x} size=0x{self._size:x}')
        else:
            result.append(' [closed]')
        result.append('>')
        return ''.join(result)

    @property
    def start(self) -> int:
        return self._start

    @property
    def size(self) -> int:
        return self._size

    def readable(self):
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        return True

    def seekable(self):
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        return True

    def read(self, n=-1):
        """Read and return up to n bytes.
        If the argument is omitted, None, or negative, data is read and returned until the end of the partition.
        """
        if self.closed:
            raise ValueError("read from closed file.")
        left = self._size - self._pos
        if n is None or n < 0 or n > left:
            n = left
        if n <= 0:
            return b''
        data = self._shared.read_at(self._start + self._pos, n)
        self._pos += len(data)
        return data

    def read1(self, n=-1):
        """Read up to n bytes with at most one read() system call."""
        return self.read(n)

    def readinto(self, b):
        data = self.read(len(b))
        b[:len(data)] = data
        return len(data)

    def seek(self, offset, whence=0):
        if self.closed:
            raise ValueError("seek on closed file.")
        if whence == 0: # Seek from start of file
            new_pos = offset
        elif whence == 1: # Seek from current position
            new_pos = self._pos + offset
        elif whence == 2: # Seek from end of partition
            new_pos = self._size + offset
        else:
            raise ValueError("whence must be os.SEEK_SET (0), "
                             "os.SEEK_CUR (1), or os.SEEK_END (2)")

        if new_pos > self._size:
            new_pos = self._size

        if new_pos < 0:
            new_pos = 0

        self._pos = new_pos
        return self._pos

    def tell(self):
        if self.closed:
            raise ValueError("tell on closed file.")
        return self._pos

    def close(self):
        if self.closed:
            return
        try:
            if self._shared is not None:
                shared = self._shared
                self._shared = None
                shared.release()
        finally:
            super().close()
