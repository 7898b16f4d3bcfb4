#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""Type-casting and ensuring functions
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'

__all__ = ['UINT32_MAX', 'to_bytes', 'to_str', 'unsigned_I', 'checked_add_I']

#######################################################################################

from typing import Optional, Union


UINT32_MAX:int = 0xffffffff

#region ## STRING / BYTES HELPERS ##

def to_bytes(text:Union[bytes,str]) -> bytes:
    """to_bytes(bytes) -> bytes
    to_bytes(str) -> str.encode('utf-16-le')

    helper function to allow passing bytes or str.
    no byte-order mark and no null terminator are added.
    """
    return text.encode('utf-16-le') if isinstance(text, str) else text


def to_str(text:Union[str,bytes]) -> str:
    """to_str(str) -> str
    to_str(bytes) -> bytes.decode('utf-16-le')

    helper function to allow passing str or bytes.
    raises UnicodeDecodeError on odd lengths and unpaired surrogates.
    """
    return text.decode('utf-16-le') if isinstance(text, (bytes, bytearray)) else text

#endregion

#region ## INT BOUNDS HELPERS ##

def unsigned_I(num:int) -> int:
    """Return num unchanged if it fits in an unsigned 32-bit integer (struct fmt 'I')

    raises OverflowError instead of truncating.
    """
    if num < 0 or num > UINT32_MAX:
        raise OverflowError(f'{num!r} does not fit in an unsigned 32-bit integer')
    return num

def checked_add_I(a:int, b:int) -> Optional[int]:
    """Return a + b, or None if the sum overflows an unsigned 32-bit integer
    """
    total = a + b
    return total if total <= UINT32_MAX else None

#endregion


del Union  # cleanup declaration-only imports
