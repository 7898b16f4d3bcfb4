#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""FARC archive reading.

layout:
  0x00  b'FARC'
  0x04  0x1C unknown bytes
  0x20  u32 sir0 type (4 or 5)
  0x24  u32 sir0 offset
  0x28  u32 sir0 length
  0x2C  u32 all data offset   (base of every sub-file data offset)
  0x30  u32 all data length

the SIR0 block header starts with the file allocation table header:
  u32 table offset, u32 entry count, u32 table kind (0: by name, 1: by hash)
followed (at table offset) by `entry count` records of:
  u32 name offset or name hash, u32 data offset, u32 data length
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'
__credits__ = '''Implementation designed mostly copied from CPython zipfile.py'''

__all__ = ['FarcFile']

#######################################################################################

import io, logging, os, shutil
from struct import calcsize, unpack
from typing import BinaryIO, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import (BadMagicError, UnsupportedSir0TypeError, UnsupportedTableKindError,
                     Sir0HeaderTooShortError, NameDecodeError, DataStartOverflowError,
                     NamedFileNotFoundError, HashedFileNotFoundError, TruncatedError)
from .farcentry import FarcEntry
from .nameindex import FileNameIndex
from .partition import Partition, SharedFile, read_exact
from .sir0 import Sir0
from ..util.typecast import checked_add_I, to_str


logger = logging.getLogger(__name__)

FarcKey = Union[FarcEntry, int, str]


class FarcFile:
    """FARC archive file type and extractor
    """
    MAGIC:bytes = b'FARC'
    SIR0_TYPES:Tuple[int,...] = (4, 5)
    TABLE_BY_NAME:int = 0
    TABLE_BY_HASH:int = 1
    TABLE_KINDS:Tuple[int,...] = (TABLE_BY_NAME, TABLE_BY_HASH)

    _HEADER_FMT:str = '<4s28sIIIII'
    HEADER_SIZE:int = calcsize(_HEADER_FMT)  # 0x34
    _TABLE_HEADER_FMT:str = '<III'
    TABLE_ENTRY_FMT:str = '<III'
    TABLE_ENTRY_SIZE:int = calcsize(TABLE_ENTRY_FMT)  # 12
    NAME_CHUNK_SIZE:int = 0x100

    _shared = None  # Set here since __del__ checks it
    _windows_illegal_name_trans_table = None

    def __init__(self, file:Union[str,os.PathLike,BinaryIO]):
        # Check if we were passed a file-like object
        if isinstance(file, os.PathLike):
            file = os.fspath(file)
        if isinstance(file, str):
            # No, it's a filename
            self._filePassed = False
            self.filename = file
            fp = io.open(file, 'rb')
        else:
            self._filePassed = True
            fp = file
            self.filename = getattr(file, 'name', None)
        self._shared = SharedFile(fp, close_file=not self._filePassed)

        try:
            self._index = self._read(self._shared)  # type: FileNameIndex
        except BaseException:
            shared = self._shared
            self._shared = None
            shared.release()
            raise

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def __del__(self):
        """Call the "close()" method in case the user forgot."""
        self.close()

    def __repr__(self) -> str:
        result = [f'<{self.__class__.__name__}']
        if self._shared is not None:
            if self.filename is not None:
                result.append(f' filename={self.filename!r}')
            result.append(f' files={len(self._index)}')
        else:
            result.append(' [closed]')
        result.append('>')
        return ''.join(result)

    def close(self):
        """Close the archive. The underlying file stays open as long as
        partitions returned by open() are still open."""
        if self._shared is None:
            return
        shared = self._shared
        self._shared = None
        shared.release()

    def _check_open(self):
        if self._shared is None:
            raise ValueError("Attempt to use FARC archive that was already closed")

    #region ## SIGNATURE CHECK FUNCTIONS ##

    @classmethod
    def checkfile(cls, filename:str) -> bool:
        if os.path.isfile(filename):
            with open(filename, 'rb') as file:
                return cls.check(file, False)
        return False
    @classmethod
    def check(cls, reader:BinaryIO, peek:bool=True) -> bool:
        signature = b''
        if hasattr(reader, 'peek'):
            signature = reader.peek(4)[:4]
        if len(signature) < 4:
            signature = reader.read(4)
            if peek: # and reader.seekable():  # restore position
                reader.seek(-len(signature), 1)
        return signature == cls.MAGIC

    #endregion

    #region ## COUNTS AND ITERATION ##

    def __len__(self) -> int:
        return len(self._index)

    def file_count(self) -> int:
        """return the number of files contained in this archive"""
        return len(self._index)

    def known_name_count(self) -> int:
        """return the number of files with a known name"""
        return sum(1 for e in self._index if e.has_name)

    def unknown_name_count(self) -> int:
        """return the number of files with an unknown name"""
        return sum(1 for e in self._index if not e.has_name)

    # every iter_*() takes its snapshot when called, later check_file_name() calls
    # do not change an iterator that was already returned.

    def iter_names(self) -> Iterator[str]:
        """iterate over the known file names"""
        names = [e.name for e in self._index if e.has_name]
        return iter(names)

    def iter_unknown_hashes(self) -> Iterator[int]:
        """iterate over the hashes without a known name"""
        hashes = [e.name_hash for e in self._index if not e.has_name]
        return iter(hashes)

    def iter_entries(self) -> Iterator[Tuple[int, Optional[str]]]:
        """iterate over (hash, name or None) for every file"""
        pairs = [(e.name_hash, e.name) for e in self._index]
        return iter(pairs)

    def iter_hashes(self) -> Iterator[int]:
        """iterate over the hashes of every file"""
        hashes = [e.name_hash for e in self._index]
        return iter(hashes)

    def infolist(self) -> List[FarcEntry]:
        """Return a list of FarcEntry instances for the files in the archive."""
        return list(self._index)

    def namelist(self) -> List[str]:
        """Return a list of the known file names in the archive."""
        return list(self.iter_names())

    #endregion

    #region ## NAME RECOVERY ##

    def check_file_name(self, name:str) -> bool:
        """Check if the file name corresponds to an unnamed hash. If it does, the entry gets that name."""
        return self._index.check_file_name(name)

    def check_file_names(self, names:Iterable[str]) -> int:
        """Call check_file_name() for every name, returns the number of names recovered"""
        return sum(1 for name in names if self._index.check_file_name(name))

    #endregion

    #region ## SUB-FILE ACCESS ##

    def getinfo(self, key:FarcKey) -> FarcEntry:
        # Make sure we have an info object
        if isinstance(key, FarcEntry):
            # 'key' is already an info object
            return key
        elif isinstance(key, int):
            entry = self._index.get_by_hash(key)
            if entry is None:
                raise HashedFileNotFoundError(key)
            return entry
        elif isinstance(key, str):
            entry = self._index.get_by_name(key)
            if entry is None:
                raise NamedFileNotFoundError(key)
            return entry
        else:
            raise TypeError(f'getinfo() key must be {FarcEntry.__name__}, int or str, not {key.__class__.__name__}')

    def get_named_file(self, name:str) -> Partition:
        """Return a handle to a file stored in this archive, from its name. The name is hashed as necessary."""
        entry = self._index.get_by_name(name)
        if entry is None:
            raise NamedFileNotFoundError(name)
        return self._open_entry(entry)

    def get_hashed_file(self, hash:int) -> Partition:
        """Return a handle to a file, whether its name is known or not."""
        entry = self._index.get_by_hash(hash)
        if entry is None:
            raise HashedFileNotFoundError(hash)
        return self._open_entry(entry)

    def open(self, key:FarcKey) -> Partition:
        return self._open_entry(self.getinfo(key))

    def read(self, key:FarcKey) -> bytes:
        """Return file bytes for key."""
        with self.open(key) as fp:
            return fp.read()

    def _open_entry(self, entry:FarcEntry) -> Partition:
        self._check_open()
        name = entry.name if entry.has_name else f'{entry.name_hash:08x}'
        return Partition(self._shared, entry.start, entry.length, name)

    #endregion

    #region ## EXTRACTION ##

    def extractall(self, path:str=None, members:Iterable[FarcKey]=None) -> List[str]:
        """Extract all members from the archive to the current working
           directory. `path' specifies a different directory to extract to.
           `members' is optional and must be a subset of the list returned
           by infolist(). Files without a known name are written as their
           8-digit hex hash, as are named files whose flattened name was
           already written by this call.
        """
        if members is None:
            members = self.infolist()

        if path is None:
            path = os.getcwd()
        else:
            path = os.fspath(path)

        written = set()
        paths = []
        for member in members:
            member = self.getinfo(member)
            arcname = self._member_arcname(member)
            if os.path.normcase(arcname) in written:
                arcname = self._unique_arcname(member, written)
                logger.warning('extracted file name clash for %r, written as %r', member.name, arcname)
            written.add(os.path.normcase(arcname))
            paths.append(self._extract_member(member, path, arcname))
        return paths

    def extract(self, member:FarcKey, path:str=None) -> str:
        """Extract a member from the archive to the current working directory,
           using its name (or hex hash). `member' may be a name, hash or a
           FarcEntry object. You can specify a different directory using `path'.
        """
        if path is None:
            path = os.getcwd()
        else:
            path = os.fspath(path)

        return self._extract_member(member, path)

    def _extract_member(self, member:FarcKey, targetpath:str, arcname:str=None) -> str:
        """Extract the FarcEntry object 'member' to a physical
           file in the directory targetpath.
        """
        member = self.getinfo(member)
        if arcname is None:
            arcname = self._member_arcname(member)

        targetpath = os.path.normpath(os.path.join(targetpath, arcname))

        # Create all upper directories if necessary.
        upperdirs = os.path.dirname(targetpath)
        if upperdirs and not os.path.exists(upperdirs):
            os.makedirs(upperdirs)

        with self._open_entry(member) as source, \
             open(targetpath, "wb") as target:
            shutil.copyfileobj(source, target)

        return targetpath

    @classmethod
    def _member_arcname(cls, member:FarcEntry) -> str:
        if member.has_name:
            arcname = cls._sanitize_name(member.name)
            if arcname:
                return arcname
        return f'{member.name_hash:08x}'

    @classmethod
    def _unique_arcname(cls, member:FarcEntry, written:set) -> str:
        """hash name of member, suffixed with a counter if even that was written"""
        arcname = f'{member.name_hash:08x}'
        counter = 1
        while os.path.normcase(arcname) in written:
            arcname = f'{member.name_hash:08x}_{counter}'
            counter += 1
        return arcname

    @classmethod
    def _sanitize_name(cls, arcname:str) -> str:
        """FARC archives have no directories, flatten any path in a name"""
        # interpret absolute pathname as relative, remove drive letter or
        # UNC path, redundant separators, "." and ".." components.
        arcname = arcname.replace('/', os.path.sep)
        if os.path.altsep:
            arcname = arcname.replace(os.path.altsep, os.path.sep)
        arcname = os.path.splitdrive(arcname)[1]
        invalid_path_parts = ('', os.path.curdir, os.path.pardir)
        arcname = '_'.join(x for x in arcname.split(os.path.sep)
                           if x not in invalid_path_parts)
        if os.path.sep == '\\':
            # filter illegal characters on Windows
            arcname = cls._sanitize_windows_name(arcname)
        return arcname

    @classmethod
    def _sanitize_windows_name(cls, arcname:str) -> str:
        """Replace bad characters and remove trailing dots."""
        table = cls._windows_illegal_name_trans_table
        if not table:
            illegal = ':<>|"?*'
            table = str.maketrans(illegal, '_' * len(illegal))
            cls._windows_illegal_name_trans_table = table
        return arcname.translate(table).rstrip('.')

    #endregion

    #region ## READ FUNCTIONS ##

    @classmethod
    def _read(cls, shared:SharedFile) -> FileNameIndex:
        with shared.locked() as reader:
            reader.seek(0)
            header = read_exact(reader, cls.HEADER_SIZE, 'FARC header')
        magic, _unknown, sir0_type, sir0_offset, sir0_length, all_data_offset, all_data_length = unpack(cls._HEADER_FMT, header)
        if magic != cls.MAGIC:
            raise BadMagicError(magic)
        if sir0_type not in cls.SIR0_TYPES:
            raise UnsupportedSir0TypeError(sir0_type)
        logger.debug('FARC sir0 type %d, sir0 at 0x%x (0x%x bytes), data at 0x%x (0x%x bytes)',
                     sir0_type, sir0_offset, sir0_length, all_data_offset, all_data_length)

        with Partition(shared, sir0_offset, sir0_length, 'sir0') as sir0_file:
            sir0 = Sir0(sir0_file)
            h = sir0.get_header()
            if len(h) < 12:
                raise Sir0HeaderTooShortError(len(h))
            table_offset, entry_count, table_kind = unpack(cls._TABLE_HEADER_FMT, h[:12])
            if table_kind not in cls.TABLE_KINDS:
                raise UnsupportedTableKindError(table_kind)
            logger.debug('FARC table kind %d, %d entries at sir0 offset 0x%x', table_kind, entry_count, table_offset)

            return cls._read_table(sir0.get_file(), table_offset, entry_count, table_kind, all_data_offset)

    @classmethod
    def _read_table(cls, reader:BinaryIO, table_offset:int, entry_count:int, table_kind:int, all_data_offset:int) -> FileNameIndex:
        index = FileNameIndex()
        entry_size = cls.TABLE_ENTRY_SIZE
        for i in range(entry_count):
            reader.seek(table_offset + i * entry_size)
            key_or_hash, data_offset, data_length = unpack(cls.TABLE_ENTRY_FMT, read_exact(reader, entry_size, 'FARC table entry'))

            data_start = checked_add_I(all_data_offset, data_offset)
            if data_start is None:
                raise DataStartOverflowError(all_data_offset, data_offset)

            if table_kind == cls.TABLE_BY_NAME:
                name = cls._read_name(reader, key_or_hash)
                index.add_with_name(name, data_start, data_length)
            else:
                index.add_with_hash(key_or_hash, data_start, data_length)
        return index

    @classmethod
    def _read_name(cls, reader:BinaryIO, offset:int) -> str:
        """read a null-terminated UTF-16LE string at offset"""
        reader.seek(offset)
        buf = bytearray()
        pos = 0  # next even position to scan for the terminator
        while True:
            end = buf.find(b'\x00\x00', pos)
            while end != -1 and end % 2:
                end = buf.find(b'\x00\x00', end + 1)
            if end != -1:
                break
            pos = len(buf) - len(buf) % 2
            chunk = reader.read(cls.NAME_CHUNK_SIZE)
            if not chunk:
                raise TruncatedError('FARC file name', pos + 2, len(buf))
            buf += chunk
        raw = bytes(buf[:end])
        try:
            return to_str(raw)
        except UnicodeDecodeError as exc:
            raise NameDecodeError(offset, raw) from exc

    #endregion
