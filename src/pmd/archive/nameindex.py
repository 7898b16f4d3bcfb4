#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""Dual-keyed (name and CRC-32 hash) index of FARC sub-file entries.

An entry is always reachable by its hash. Entries of name-indexed archives are also
reachable by name from the start, while entries of hash-indexed archives gain a name
once a candidate matching their hash is passed to `check_file_name()`.
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'

__all__ = ['FileNameIndex']

#######################################################################################

import logging, threading
from typing import Dict, Iterator, List, Optional, Union

from ..crypt import hash32
from .errors import (NameConflictError, UnnamedHashConflictError, NamedHashConflictError,
                     BothNamedHashConflictError, IndexInconsistencyError)
from .farcentry import FarcEntry


logger = logging.getLogger(__name__)


class FileNameIndex:
    """FileNameIndex()

    entries are kept in insertion order and are never removed.
    adding, name recovery and name lookup are serialized by an internal lock.
    """
    def __init__(self):
        self._entries = []  # type: List[FarcEntry]
        self._by_hash = {}  # type: Dict[int, int]
        self._by_name = {}  # type: Dict[str, int]
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FarcEntry]:
        with self._lock:
            return iter(list(self._entries))

    def __contains__(self, key:Union[int,str]) -> bool:
        if isinstance(key, int):
            return key in self._by_hash
        if isinstance(key, str):
            return self.get_by_name(key) is not None
        return False

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} entries={len(self._entries)} named={len(self._by_name)}>'

    #region ## ADDING ##

    def add_with_name(self, name:str, start:int, length:int) -> FarcEntry:
        """add an entry of a name-indexed table, hashed with hash32(name)"""
        return self._add(hash32(name), name, start, length)

    def add_with_hash(self, hash:int, start:int, length:int) -> FarcEntry:
        """add an entry of a hash-indexed table, with no known name"""
        return self._add(hash, None, start, length)

    def _add(self, hash:int, name:Optional[str], start:int, length:int) -> FarcEntry:
        with self._lock:
            position = len(self._entries)
            # the name is registered first, then rolled back if the hash collides
            if name is not None:
                if name in self._by_name:
                    raise NameConflictError(name)
                self._by_name[name] = position

            existing_pos = self._by_hash.setdefault(hash, position)
            if existing_pos != position:
                if name is not None:
                    del self._by_name[name]
                existing_name = self._entries[existing_pos].name
                if existing_name is None:
                    raise UnnamedHashConflictError(hash, None, name)
                elif name is None:
                    raise NamedHashConflictError(hash, existing_name, None)
                else:
                    raise BothNamedHashConflictError(hash, existing_name, name)

            entry = FarcEntry(start, length, hash, name)
            self._entries.append(entry)
            return entry

    #endregion

    #region ## NAME RECOVERY ##

    def check_file_name(self, name:str) -> bool:
        """give a name to the unnamed entry whose hash matches hash32(name).

        returns False (and changes nothing) when no entry has that hash,
        or when the entry already has a name.
        """
        hash = hash32(name)
        with self._lock:
            position = self._by_hash.get(hash)
            if position is None:
                if name not in self._by_name:
                    logger.debug('hash not found in the file names: 0x%08x for %r', hash, name)
                return False
            entry = self._entries[position]
            if entry.has_name:
                return False

            logger.debug('found a corresponding hash: 0x%08x <-> %r', hash, name)
            other = self._by_name.get(name)
            if other is not None and other != position:
                raise IndexInconsistencyError(
                    f'hash mismatch: the name {name!r} is already used by an entry with the hash '
                    f'0x{self._entries[other].name_hash:08x}, not 0x{hash:08x}')
            entry.name = name
            self._by_name[name] = position
            return True

    #endregion

    #region ## LOOKUP ##

    def get_by_name(self, name:str) -> Optional[FarcEntry]:
        """lookup by name, falling back to an unnamed entry with the matching hash.

        returns None if the matching hash belongs to an entry with a different name.
        """
        hash = hash32(name)
        with self._lock:
            position = self._by_name.get(name)
            if position is not None:
                return self._entries[position]
            position = self._by_hash.get(hash)
            if position is None:
                return None
            entry = self._entries[position]
            if entry.has_name:
                # same hash, different known name
                return None
            return entry

    def get_by_hash(self, hash:int) -> Optional[FarcEntry]:
        position = self._by_hash.get(hash)
        return None if position is None else self._entries[position]

    #endregion
