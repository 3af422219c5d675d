"""Database codec port for whole-database serialization.

This outbound port defines the contract for turning the full set of tables
into a byte stream and back. Implementations differ only in the wire
format; both start with the same two text header lines:

    MINIQLITE 1
    TABLE_COUNT <n>

Decoding yields plain TableImage values. Rebuilding live tables from them
is the caller's job, so decoded rows pass through the ordinary insert path.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Iterator, Protocol

from miniqlite.domain.entities import Table
from miniqlite.domain.value_objects import ColumnDef, PersistenceFormat

MAGIC = "MINIQLITE 1"
"""First line of every database file."""

TABLE_COUNT_KEYWORD = "TABLE_COUNT"

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"
"""Undecodable bytes map to lone surrogates and back, so cells are byte-exact."""


@dataclass
class TableImage:
    """A table as read from a stream: schema plus rows, no storage layout."""

    name: str
    columns: list[ColumnDef]
    rows: list[list[str]] = field(default_factory=list)


class DatabaseCodec(Protocol):
    """Protocol for database serialization formats."""

    @property
    @abstractmethod
    def format(self) -> PersistenceFormat:
        """The persistence format this codec implements."""
        ...

    @abstractmethod
    def dump(self, tables: Iterable[Table], stream: BinaryIO) -> int:
        """Write all tables to a stream.

        Writing is incremental; if it fails partway, whatever was already
        written stays in the stream.

        Args:
            tables: Tables in creation order.
            stream: Binary stream opened for writing.

        Returns:
            Number of bytes written.

        Raises:
            FormatError: A table cannot be represented in this format.
            OSError: The stream rejected a write.
        """
        ...

    @abstractmethod
    def load(self, stream: BinaryIO) -> Iterator[TableImage]:
        """Read tables from a stream, one image per table in file order.

        Args:
            stream: Binary stream positioned at the magic line.

        Yields:
            One TableImage per table.

        Raises:
            FormatError: The stream is malformed or truncated.
        """
        ...
