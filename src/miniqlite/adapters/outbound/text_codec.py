"""Line-oriented text codec.

File Format:
    MINIQLITE 1
    TABLE_COUNT <n>
    TABLE <name> <num_columns> <num_rows>     one per table, followed by
    COLUMN <name> <INT|TEXT|FLOAT>            one per column
    ROW\\t<v0>\\t<v1>...\\t<v_{k-1}>             one per row

Cells are separated by tabs and rows end with a newline, with no escaping.
A cell containing either character is still written as-is (a warning is
logged) and the resulting file will fail to load.
"""

from __future__ import annotations

from typing import BinaryIO, Iterable, Iterator

from miniqlite.adapters.outbound.header import (
    encode_line,
    parse_count,
    read_header,
    read_line,
    write_header,
)
from miniqlite.domain.entities import Table
from miniqlite.domain.errors import FormatError
from miniqlite.domain.value_objects import ColumnDef, ColumnType, PersistenceFormat
from miniqlite.infrastructure.logging import get_logger
from miniqlite.ports.outbound import TableImage

logger = get_logger(__name__)

_UNSAFE_CHARS = ("\t", "\n")


class TextCodec:
    """Text implementation of the DatabaseCodec protocol."""

    @property
    def format(self) -> PersistenceFormat:
        return PersistenceFormat.TEXT

    def dump(self, tables: Iterable[Table], stream: BinaryIO) -> int:
        tables = list(tables)
        written = write_header(stream, len(tables))

        for table in tables:
            lines = [f"TABLE {table.name} {table.num_columns} {table.num_rows}"]
            lines.extend(f"COLUMN {c.name} {c.column_type.keyword}" for c in table.columns)
            data = b"".join(encode_line(line) for line in lines)
            stream.write(data)
            written += len(data)

            warned = False
            for row in table.rows():
                if not warned and any(ch in value for value in row for ch in _UNSAFE_CHARS):
                    logger.warning(
                        "text_format_unsafe_value",
                        table=table.name,
                        hint="cell contains a tab or newline; use the binary format",
                    )
                    warned = True
                data = encode_line("ROW" + "".join("\t" + value for value in row))
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
        fields = read_line(stream, "table line").split()
        if len(fields) != 4 or fields[0] != "TABLE":
            raise FormatError("Expected 'TABLE <name> <columns> <rows>' line")
        name = fields[1]
        num_columns = parse_count(fields[2], "column count")
        num_rows = parse_count(fields[3], "row count")

        columns = []
        for _ in range(num_columns):
            col_fields = read_line(stream, "column line").split()
            if len(col_fields) != 3 or col_fields[0] != "COLUMN":
                raise FormatError(f"Expected 'COLUMN <name> <type>' line in table '{name}'")
            columns.append(ColumnDef(col_fields[1], ColumnType.from_keyword(col_fields[2])))

        image = TableImage(name=name, columns=columns)
        for _ in range(num_rows):
            line = read_line(stream, "row line")
            if not line.startswith("ROW\t"):
                raise FormatError(f"Expected 'ROW' line in table '{name}'")
            values = line[len("ROW\t"):].split("\t")
            if len(values) != num_columns:
                raise FormatError(
                    f"Row in table '{name}' has {len(values)} cells, expected {num_columns}"
                )
            image.rows.append(values)

        return image
