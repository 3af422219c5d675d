"""
MiniQLite - an embedded table store

A small single-process database driven by a subset of SQL, with row-major
and column-major table layouts and text and binary database files.
"""

__version__ = "0.1.0"
