"""Database-wide mode switches."""

from __future__ import annotations

from enum import Enum


class StorageLayout(Enum):
    """Physical layout of a table's cells."""

    ROW_MAJOR = "row"
    """One list per row, cells in column order."""

    COLUMN_MAJOR = "column"
    """One list per column, cells in row order."""


class PersistenceFormat(Enum):
    """On-disk format used by save and load."""

    TEXT = "text"
    """Line-oriented, tab-separated cells."""

    BINARY = "binary"
    """Fixed-width names and length-prefixed cells."""
