#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""Pokémon Mystery Dungeon (3DS) container formats Python library package

modules:
  pmd.crypt      - CRC-32 hashing of sub-file names.

submodules:
  pmd.archive    - reading `FARC` archive files (and their SIR0 file table) and writing hash-indexed ones.
  pmd.util       - helper functions used throughout the package.

"""

__version__ = '1.0.0'
__date__    = '2026-10-18'

#######################################################################################

from .crypt import hash32, to_hash32
