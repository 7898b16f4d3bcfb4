#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""FARC sub-file name hashing utils
"""

__version__ = '1.0.0'
__date__    = '2026-10-18'

__all__ = ['CRC32_POLY', 'CRC32_TABLE', 'hash32', 'to_hash32']

# <https://en.wikipedia.org/wiki/Cyclic_redundancy_check>
# <https://users.ece.cmu.edu/~koopman/crc/crc32.html>

#######################################################################################

from typing import Tuple, Union
from zlib import crc32 as _crc32
from .util.typecast import to_bytes


#######################################################################################

#region ## TYPEDEFS AND HELPERS ##

StrBytes = Union[str,bytes]
IntStrBytes = Union[int,str,bytes]


def to_hash32(value:IntStrBytes) -> int:
    """to_hash32(bytes) -> hash32(bytes)
    to_hash32(str)   -> hash32(str)
    to_hash32(int)   -> int & 0xffffffff

    helper function to allow passing a sub-file name or hash value.
    """
    return (value & 0xffffffff) if isinstance(value, int) else hash32(value)

#endregion

#######################################################################################

#region ## CRC TABLE SETUP FUNCTIONS ##

CRC32_POLY:int = 0xEDB88320  # CRC-32 reversed polynomial (IEEE 802.3)

## standard CRC-32 (table calculation) used by zlib
def _calc32(num:int, poly:int=CRC32_POLY) -> int:
    for _ in range(8):
        if num & 0x1: num = (num >> 1) ^ poly
        else:         num >>= 1
    return num

CRC32_TABLE:Tuple[int,...] = tuple(_calc32(n) for n in range(256))

#endregion

#region ## CRC HASH FUNCTIONS ##

# CRC-32 of the UTF-16LE name, used as the key of hash-indexed FARC tables
def hash32(name:StrBytes, value:int=0) -> int:
    """hash32('') -> 0x00000000
    hash32(b'123456789') -> 0xcbf43926

    returns the CRC-32 hash of the name encoded as UTF-16LE (no byte-order mark,
    no null terminator). bytes are hashed unchanged.
    """
    return _crc32(to_bytes(name), value) & 0xffffffff
    ## non-zlib implementation:
    #TBL = CRC32_TABLE
    #value = ~value & 0xffffffff  # init (and mask to uint32)
    #for o in to_bytes(name):
    #    value = (value >> 8) ^ TBL[(value ^ o) & 0xff]
    #return value ^ 0xffffffff  # xorout

#endregion


del Tuple  # cleanup declaration-only imports
