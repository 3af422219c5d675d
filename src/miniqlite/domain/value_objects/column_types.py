"""Column types and column definitions.

The declared type of a column decides which literals it accepts. Cells are
kept as the text they were written with; the type only validates them.
The integer value of each ColumnType is its tag in the binary file format.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum


_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

MAX_NAME_LEN = 64
"""Size of a name block in the binary format, including the NUL terminator."""


class ColumnType(IntEnum):
    """Declared type of a column."""

    INT = 0
    TEXT = 1
    FLOAT = 2

    @classmethod
    def from_keyword(cls, keyword: str) -> ColumnType:
        """Map a type keyword to a column type.

        INT/INTEGER map to INT, FLOAT/REAL map to FLOAT. Every other keyword,
        including TEXT, maps to TEXT. Matching is case-insensitive.
        """
        upper = keyword.upper()
        if upper in ("INT", "INTEGER"):
            return cls.INT
        if upper in ("FLOAT", "REAL"):
            return cls.FLOAT
        return cls.TEXT

    @classmethod
    def from_tag(cls, tag: int) -> ColumnType:
        """Look up a column type by its binary tag.

        Raises:
            ValueError: If the tag is not a known column type.
        """
        try:
            return cls(tag)
        except ValueError:
            raise ValueError(f"Unknown column type tag: {tag}") from None

    @property
    def keyword(self) -> str:
        """Canonical keyword written to the text format."""
        return self.name

    def accepts(self, value: str) -> bool:
        """Check whether a literal is valid for this type.

        The empty string stands for "no value" and is valid for every type.
        """
        if value == "" or self is ColumnType.TEXT:
            return True
        if self is ColumnType.INT:
            return _INT_PATTERN.fullmatch(value) is not None
        # float() tolerates padding and digit separators, literals may not
        if value != value.strip() or "_" in value:
            return False
        try:
            float(value)
        except ValueError:
            return False
        return True


@dataclass(frozen=True, slots=True)
class ColumnDef:
    """A column of a table: a name and a declared type."""

    name: str
    column_type: ColumnType = ColumnType.TEXT

    def __str__(self) -> str:
        return f"{self.name} {self.column_type.keyword}"
