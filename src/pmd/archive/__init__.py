#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""FARC archive file reading and writing tools.

modules:
  pmd.archive.errors     - exceptions raised by the archive modules.
  pmd.archive.partition  - independent streams over ranges of one shared file.
  pmd.archive.sir0       - SIR0 relocatable container (carries the FARC file table).
  pmd.archive.farcentry  - sub-file entry record.
  pmd.archive.nameindex  - name and hash index of the sub-file entries.
  pmd.archive.farcfile   - class for reading file entries from `FARC` archive files.
  pmd.archive.farcwriter - class for writing hash-indexed `FARC` archive files.

"""

__version__ = '1.0.0'
__date__    = '2026-10-18'

#######################################################################################

from .errors import *
from .farcentry import FarcEntry
from .nameindex import FileNameIndex
from .partition import Partition, SharedFile
from .farcfile import FarcFile
from .farcwriter import FarcWriter
