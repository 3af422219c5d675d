"""Length-prefixed binary codec.

File Format:
    MINIQLITE 1\\n                           text header, as in the text format
    TABLE_COUNT <n>\\n
    per table:
        name            64 bytes, UTF-8, NUL-padded
        num_columns     int32
        per column:
            name        64 bytes, UTF-8, NUL-padded
            type tag    int32 (0 = INT, 1 = TEXT, 2 = FLOAT)
        num_rows        int32
        per cell, row by row:
            length      int32
            bytes       `length` raw bytes

All integers are signed 32-bit little-endian. Cells are length-prefixed, so
tabs, newlines and arbitrary bytes round-trip unchanged. There is no
checksum.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterable, Iterator

from miniqlite.adapters.outbound.header import read_header, write_header
from miniqlite.domain.entities import Table
from miniqlite.domain.errors import FormatError
from miniqlite.domain.value_objects import (
    MAX_NAME_LEN,
    ColumnDef,
    ColumnType,
    PersistenceFormat,
)
from miniqlite.ports.outbound import ENCODING, ENCODING_ERRORS, TableImage

INT_FORMAT = "<i"
INT_SIZE = struct.calcsize(INT_FORMAT)
INT_MAX = 2**31 - 1


def encode_name(name: str) -> bytes:
    """Encode a name into a fixed-size NUL-padded block.

    Raises:
        FormatError: The name does not fit with its NUL terminator.
    """
    raw = name.encode(ENCODING, ENCODING_ERRORS)
    if len(raw) >= MAX_NAME_LEN:
        raise FormatError(
            f"Name {name!r} is {len(raw)} bytes, the limit is {MAX_NAME_LEN - 1}"
        )
    if b"\x00" in raw:
        raise FormatError(f"Name {name!r} contains a NUL byte")
    return raw.ljust(MAX_NAME_LEN, b"\x00")


def decode_name(block: bytes) -> str:
    """Decode a NUL-padded name block."""
    return block.split(b"\x00", 1)[0].decode(ENCODING, ENCODING_ERRORS)


def encode_int(value: int) -> bytes:
    if not 0 <= value <= INT_MAX:
        raise FormatError(f"Count {value} does not fit in 32 bits")
    return struct.pack(INT_FORMAT, value)


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise FormatError(f"Unexpected end of file reading {what}")
    return data


def _read_count(stream: BinaryIO, what: str) -> int:
    (value,) = struct.unpack(INT_FORMAT, _read_exact(stream, INT_SIZE, what))
    if value < 0:
        raise FormatError(f"Negative {what}: {value}")
    return value


class BinaryCodec:
    """Binary implementation of the DatabaseCodec protocol."""

    @property
    def format(self) -> PersistenceFormat:
        return PersistenceFormat.BINARY

    def dump(self, tables: Iterable[Table], stream: BinaryIO) -> int:
        tables = list(tables)
        written = write_header(stream, len(tables))
        for table in tables:
            written += self._write_table(table, stream)
        return written

    def _write_table(self, table: Table, stream: BinaryIO) -> int:
        parts = [encode_name(table.name), encode_int(table.num_columns)]
        for column in table.columns:
            parts.append(encode_name(column.name))
            parts.append(encode_int(int(column.column_type)))
        parts.append(encode_int(table.num_rows))
        data = b"".join(parts)
        stream.write(data)
        written = len(data)

        for row in table.rows():
            cells = []
            for value in row:
                raw = value.encode(ENCODING, ENCODING_ERRORS)
                cells.append(encode_int(len(raw)))
                cells.append(raw)
            data = b"".join(cells)
            stream.write(data)
            written += len(data)

        return written

    def load(self, stream: BinaryIO) -> Iterator[TableImage]:
        table_count = read_header(stream)

        for _ in range(table_count):
            yield self._read_table(stream)

        if stream.read(1):
            raise FormatError("Trailing data after last table")

    def _read_table(self, stream: BinaryIO) -> TableImage:
        name = decode_name(_read_exact(stream, MAX_NAME_LEN, "table name"))
        num_columns = _read_count(stream, "column count")

        columns = []
        for _ in range(num_columns):
            col_name = decode_name(_read_exact(stream, MAX_NAME_LEN, "column name"))
            (tag,) = struct.unpack(INT_FORMAT, _read_exact(stream, INT_SIZE, "column type"))
            try:
                column_type = ColumnType.from_tag(tag)
            except ValueError as e:
                raise FormatError(f"Column '{col_name}' of table '{name}': {e}") from e
            columns.append(ColumnDef(col_name, column_type))

        num_rows = _read_count(stream, "row count")
        image = TableImage(name=name, columns=columns)
        for _ in range(num_rows):
            row = []
            for _ in range(num_columns):
                length = _read_count(stream, "cell length")
                raw = _read_exact(stream, length, "cell")
                row.append(raw.decode(ENCODING, ENCODING_ERRORS))
            image.rows.append(row)

        return image
