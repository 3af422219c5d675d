"""Unit tests for the binary codec."""

from __future__ import annotations

import io
import struct

import pytest

from miniqlite.adapters.outbound import BinaryCodec
from miniqlite.adapters.outbound.binary_codec import decode_name, encode_name
from miniqlite.domain.entities import Table
from miniqlite.domain.errors import FormatError
from miniqlite.domain.value_objects import ColumnDef, ColumnType, StorageLayout

HEADER = b"MINIQLITE 1\nTABLE_COUNT 1\n"


def _table(rows: list[list[str]], layout: StorageLayout = StorageLayout.ROW_MAJOR) -> Table:
    table = Table.create(
        "t",
        [ColumnDef("id", ColumnType.INT), ColumnDef("note", ColumnType.TEXT)],
        layout,
    )
    for row in rows:
        table.storage.append(row)
    return table


def _dump(*tables: Table) -> bytes:
    stream = io.BytesIO()
    BinaryCodec().dump(list(tables), stream)
    return stream.getvalue()


def _load(data: bytes) -> list:
    return list(BinaryCodec().load(io.BytesIO(data)))


@pytest.mark.unit
class TestNameBlocks:
    """Tests for fixed-size name blocks."""

    def test_encode_pads_to_64_bytes(self) -> None:
        block = encode_name("users")

        assert len(block) == 64
        assert block.startswith(b"users\x00")
        assert decode_name(block) == "users"

    def test_encode_max_length(self) -> None:
        assert decode_name(encode_name("n" * 63)) == "n" * 63

    def test_encode_too_long(self) -> None:
        with pytest.raises(FormatError, match="limit is 63"):
            encode_name("n" * 64)

    def test_encode_multibyte_too_long(self) -> None:
        # 32 characters, 64 bytes
        with pytest.raises(FormatError):
            encode_name("é" * 32)


@pytest.mark.unit
class TestBinaryDump:
    """Tests for writing the binary format."""

    def test_dump_layout(self, layout: StorageLayout) -> None:
        data = _dump(_table([["7", "hi"]], layout))

        expected = (
            HEADER
            + encode_name("t")
            + struct.pack("<i", 2)
            + encode_name("id")
            + struct.pack("<i", 0)
            + encode_name("note")
            + struct.pack("<i", 1)
            + struct.pack("<i", 1)
            + struct.pack("<i", 1) + b"7"
            + struct.pack("<i", 2) + b"hi"
        )
        assert data == expected

    def test_dump_returns_bytes_written(self) -> None:
        stream = io.BytesIO()

        written = BinaryCodec().dump([_table([["1", "x"]])], stream)

        assert written == len(stream.getvalue())


@pytest.mark.unit
class TestBinaryLoad:
    """Tests for reading the binary format."""

    def test_round_trip_preserves_awkward_cells(self) -> None:
        rows = [
            ["1", "tab\tand\nnewline"],
            ["2", ""],
            ["3", "café ☃"],
        ]

        (image,) = _load(_dump(_table(rows)))

        assert image.name == "t"
        assert image.columns == [
            ColumnDef("id", ColumnType.INT),
            ColumnDef("note", ColumnType.TEXT),
        ]
        assert image.rows == rows

    def test_round_trip_raw_bytes(self) -> None:
        data = (
            HEADER
            + encode_name("t")
            + struct.pack("<i", 1)
            + encode_name("blob")
            + struct.pack("<i", 1)
            + struct.pack("<i", 1)
            + struct.pack("<i", 2) + b"\xff\xfe"
        )

        (image,) = _load(data)
        stream = io.BytesIO()
        table = Table.create("t", image.columns, StorageLayout.ROW_MAJOR)
        table.storage.append(image.rows[0])
        BinaryCodec().dump([table], stream)

        assert stream.getvalue() == data

    def test_empty_database(self) -> None:
        assert _load(b"MINIQLITE 1\nTABLE_COUNT 0\n") == []

    def test_bad_type_tag(self) -> None:
        data = (
            HEADER
            + encode_name("t")
            + struct.pack("<i", 1)
            + encode_name("a")
            + struct.pack("<i", 9)
            + struct.pack("<i", 0)
        )

        with pytest.raises(FormatError, match="Unknown column type tag: 9"):
            _load(data)

    def test_negative_count(self) -> None:
        data = HEADER + encode_name("t") + struct.pack("<i", -1)

        with pytest.raises(FormatError, match="Negative column count"):
            _load(data)

    @pytest.mark.parametrize("cut", [1, 30, 64, 70, 140, -1])
    def test_truncated(self, cut: int) -> None:
        data = _dump(_table([["1", "hello"]]))

        with pytest.raises(FormatError, match="end of file"):
            _load(data[: len(HEADER) + cut] if cut > 0 else data[:cut])

    def test_trailing_data(self) -> None:
        data = _dump(_table([["1", "x"]])) + b"\x00"

        with pytest.raises(FormatError, match="Trailing data"):
            _load(data)

    def test_text_file_is_rejected(self) -> None:
        data = b"MINIQLITE 1\nTABLE_COUNT 1\nTABLE t 1 0\nCOLUMN a INT\n"

        with pytest.raises(FormatError):
            _load(data)
