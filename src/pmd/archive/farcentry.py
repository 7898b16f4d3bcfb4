#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""FARC sub-file entry record.
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'

__all__ = ['FarcEntry']

#######################################################################################

from typing import Optional


class FarcEntry:
    """FarcEntry(start:int, length:int, name_hash:int, name:str=None)

    start, length and name_hash are immutable.
    name may only be assigned once, when it is still None.
    """
    __slots__ = ('start', 'length', 'name_hash', 'name')
    start:int
    length:int
    name_hash:int
    name:Optional[str]

    def __init__(self, start:int, length:int, name_hash:int, name:Optional[str]=None):
        self.start = start
        self.length = length
        self.name_hash = name_hash
        self.name = name

    #region ## IMMUTABLE ##

    def __setattr__(self, name, value):
        if hasattr(self, name) and (name != 'name' or self.name is not None):
            raise AttributeError(f'{name!r} attribute is readonly')
        super().__setattr__(name, value)

    #endregion

    def __repr__(self) -> str:
        name = f', name={self.name!r}' if self.name is not None else ''
        return f'{self.__class__.__name__}({self.start!r}, {self.length!r}, 0x{self.name_hash:08x}{name})'
    __str__ = __repr__

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def has_name(self) -> bool:
        return self.name is not None
