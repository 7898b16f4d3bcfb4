#!/usr/bin/env python3
#-*- coding: utf-8 -*-
"""Various utilities and helper functions submodule.

modules:
  pmd.util.typecast - type casting for str and bytes ('utf-16-le') and checked fixed-width ints.
"""

__version__ = '0.1.0'
__date__    = '2026-10-18'

#######################################################################################
