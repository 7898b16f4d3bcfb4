#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""Exceptions raised while reading and writing FARC archives.

Every class derives from FarcError. Builtin categories are mixed in where they apply,
so `except KeyError` still catches a lookup miss and `except ValueError` a malformed file.
OSError raised by the underlying file object is never wrapped.
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'

__all__ = ['FarcError', 'TruncatedError', 'PartitionError', 'PoisonedError', 'Sir0Error',
           'BadMagicError', 'UnsupportedSir0TypeError', 'UnsupportedTableKindError',
           'Sir0HeaderTooShortError', 'NameDecodeError', 'DataStartOverflowError',
           'FarcFileNotFoundError', 'NamedFileNotFoundError', 'HashedFileNotFoundError',
           'FileNameConflictError', 'NameConflictError', 'HashConflictError',
           'UnnamedHashConflictError', 'NamedHashConflictError', 'BothNamedHashConflictError',
           'IndexInconsistencyError', 'FarcTooLargeError']

#######################################################################################

from typing import Optional


class FarcError(Exception):
    """Base class of every error raised by pmd.archive and pmd.sir0"""


#region ## STREAM ERRORS ##

class TruncatedError(FarcError, EOFError):
    """TruncatedError(what:str, expected:int, actual:int)"""
    def __init__(self, what:str, expected:int, actual:int):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(f'unexpected end of data while reading {what}: expected {expected} bytes, got {actual}')

class PartitionError(FarcError, ValueError):
    """A partition range does not fit inside the shared file."""
    def __init__(self, offset:int, length:int, size:int):
        self.offset = offset
        self.length = length
        self.size = size
        super().__init__(f'partition [0x{offset:x}, 0x{offset + length:x}) is out of the file bounds (size 0x{size:x})')

class PoisonedError(FarcError):
    """A previous operation failed while holding the shared file lock."""
    def __init__(self):
        super().__init__('the lock guarding the shared file is poisoned')

class Sir0Error(FarcError, ValueError):
    """Malformed SIR0 container, or pointers that cannot be encoded."""

#endregion

#region ## FORMAT ERRORS ##

class BadMagicError(FarcError, ValueError):
    def __init__(self, magic:bytes):
        self.magic = magic
        super().__init__(f'invalid FARC magic: {magic!r}')

class UnsupportedSir0TypeError(FarcError, ValueError):
    def __init__(self, sir0_type:int):
        self.sir0_type = sir0_type
        super().__init__(f'unsupported FARC sir0 type: {sir0_type!r}')

class UnsupportedTableKindError(FarcError, ValueError):
    def __init__(self, table_kind:int):
        self.table_kind = table_kind
        super().__init__(f'unsupported FARC table kind: {table_kind!r}')

class Sir0HeaderTooShortError(FarcError, ValueError):
    def __init__(self, length:int):
        self.length = length
        super().__init__(f'the sir0 header should be at least 12 bytes, but it only has {length} bytes')

class NameDecodeError(FarcError, ValueError):
    def __init__(self, offset:int, raw:bytes):
        self.offset = offset
        self.raw = raw
        super().__init__(f'invalid UTF-16LE file name at sir0 offset 0x{offset:x}: {raw!r}')

class DataStartOverflowError(FarcError, OverflowError):
    def __init__(self, all_data_offset:int, data_offset:int):
        self.all_data_offset = all_data_offset
        self.data_offset = data_offset
        super().__init__(f'a contained file position overflows a u32 integer (0x{all_data_offset:x}+0x{data_offset:x})')

#endregion

#region ## LOOKUP ERRORS ##

class FarcFileNotFoundError(FarcError, KeyError):
    def __str__(self) -> str:
        # KeyError.__str__ returns repr(args[0])
        return str(self.args[0])

class NamedFileNotFoundError(FarcFileNotFoundError):
    def __init__(self, name:str):
        self.name = name
        super().__init__(f'there is no file named {name!r} in the archive')

class HashedFileNotFoundError(FarcFileNotFoundError):
    def __init__(self, hash:int):
        self.hash = hash
        super().__init__(f'there is no file with the hash 0x{hash:08x} in the archive')

#endregion

#region ## INDEX CONFLICT ERRORS ##

class FileNameConflictError(FarcError):
    """Two table entries claim the same identity."""

class NameConflictError(FileNameConflictError):
    def __init__(self, name:str):
        self.name = name
        super().__init__(f'a file with the name {name!r} is already present')

class HashConflictError(FileNameConflictError):
    """HashConflictError(hash:int, existing_name:str=None, new_name:str=None)

    raised through one of its three subclasses.
    """
    def __init__(self, hash:int, existing_name:Optional[str]=None, new_name:Optional[str]=None):
        self.hash = hash
        self.existing_name = existing_name
        self.new_name = new_name
        super().__init__(self._message())

    def _message(self) -> str:
        return f'a file with the hash 0x{self.hash:08x} is already present'

class UnnamedHashConflictError(HashConflictError):
    """the existing entry has no known name"""
    def _message(self) -> str:
        if self.new_name is not None:
            return f'a file with the hash 0x{self.hash:08x} is already present (adding {self.new_name!r})'
        return super()._message()

class NamedHashConflictError(HashConflictError):
    """only the existing entry has a known name"""
    def _message(self) -> str:
        return f'a file with the hash 0x{self.hash:08x} is already present, with the name {self.existing_name!r}'

class BothNamedHashConflictError(HashConflictError):
    """both entries have a known name"""
    def _message(self) -> str:
        return (f'the files {self.existing_name!r} and {self.new_name!r} '
                f'have the same hash 0x{self.hash:08x}')

class IndexInconsistencyError(FarcError):
    """The name and hash maps of a FileNameIndex disagree."""

#endregion

#region ## WRITE ERRORS ##

class FarcTooLargeError(FarcError, OverflowError):
    def __init__(self, what:str, value:int):
        self.what = what
        self.value = value
        super().__init__(f'the archive is too big: {what} ({value!r}) does not fit in a u32 integer. '
                         'This usually means the result would take more than 4GiB')

#endregion


del Optional  # cleanup declaration-only imports
