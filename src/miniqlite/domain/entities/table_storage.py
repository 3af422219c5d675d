"""Physical storage strategies for table cells.

A table keeps its cells in exactly one of two layouts:

    Row-major:      rows[r][c]     one list per row
    Column-major:   columns[c][r]  one list per column

Both implement the TableStorage interface, whose central operation is
cell(row, column). Query code is written once against that accessor and
never looks at the layout.

Invariant: every stored row has exactly num_columns cells.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Sequence

from miniqlite.domain.value_objects import StorageLayout


class TableStorage(ABC):
    """Ordered sequence of fixed-width rows of text cells."""

    layout: StorageLayout

    def __init__(self, num_columns: int) -> None:
        self._num_columns = num_columns

    @property
    def num_columns(self) -> int:
        return self._num_columns

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored rows."""
        ...

    @abstractmethod
    def append(self, values: Sequence[str]) -> None:
        """Append one row. `values` must have num_columns entries."""
        ...

    @abstractmethod
    def cell(self, row: int, column: int) -> str:
        """Return the cell at (row, column)."""
        ...

    @abstractmethod
    def set_cell(self, row: int, column: int, value: str) -> None:
        """Overwrite the cell at (row, column)."""
        ...

    @abstractmethod
    def retain(self, keep: Sequence[bool]) -> None:
        """Drop every row whose flag in `keep` is False, preserving order."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove all rows."""
        ...

    def row(self, row: int) -> list[str]:
        """Return a copy of one row in column order."""
        return [self.cell(row, c) for c in range(self._num_columns)]

    def __iter__(self) -> Iterator[list[str]]:
        for r in range(len(self)):
            yield self.row(r)

    def _check_width(self, values: Sequence[str]) -> None:
        if len(values) != self._num_columns:
            raise ValueError(
                f"Row has {len(values)} cells, storage has {self._num_columns} columns"
            )

    def _check_keep(self, keep: Sequence[bool]) -> None:
        if len(keep) != len(self):
            raise ValueError(f"Expected {len(self)} keep flags, got {len(keep)}")


class RowMajorStorage(TableStorage):
    """Cells stored row by row."""

    layout = StorageLayout.ROW_MAJOR

    def __init__(self, num_columns: int) -> None:
        super().__init__(num_columns)
        self._rows: list[list[str]] = []

    def __len__(self) -> int:
        return len(self._rows)

    def append(self, values: Sequence[str]) -> None:
        self._check_width(values)
        self._rows.append(list(values))

    def cell(self, row: int, column: int) -> str:
        return self._rows[row][column]

    def set_cell(self, row: int, column: int, value: str) -> None:
        self._rows[row][column] = value

    def retain(self, keep: Sequence[bool]) -> None:
        self._check_keep(keep)
        self._rows = [r for r, k in zip(self._rows, keep) if k]

    def clear(self) -> None:
        self._rows = []

    def row(self, row: int) -> list[str]:
        return list(self._rows[row])


class ColumnMajorStorage(TableStorage):
    """Cells stored column by column."""

    layout = StorageLayout.COLUMN_MAJOR

    def __init__(self, num_columns: int) -> None:
        super().__init__(num_columns)
        self._columns: list[list[str]] = [[] for _ in range(num_columns)]
        self._num_rows = 0

    def __len__(self) -> int:
        return self._num_rows

    def append(self, values: Sequence[str]) -> None:
        self._check_width(values)
        appended = 0
        try:
            for column, value in zip(self._columns, values):
                column.append(value)
                appended += 1
        except BaseException:
            # Undo the columns already extended so all columns stay aligned
            for column in self._columns[:appended]:
                column.pop()
            raise
        self._num_rows += 1

    def cell(self, row: int, column: int) -> str:
        if not 0 <= row < self._num_rows:
            raise IndexError(f"Row {row} out of range")
        return self._columns[column][row]

    def set_cell(self, row: int, column: int, value: str) -> None:
        if not 0 <= row < self._num_rows:
            raise IndexError(f"Row {row} out of range")
        self._columns[column][row] = value

    def retain(self, keep: Sequence[bool]) -> None:
        self._check_keep(keep)
        self._columns = [
            [v for v, k in zip(column, keep) if k] for column in self._columns
        ]
        self._num_rows = sum(1 for k in keep if k)

    def clear(self) -> None:
        self._columns = [[] for _ in range(self._num_columns)]
        self._num_rows = 0


def create_storage(layout: StorageLayout, num_columns: int) -> TableStorage:
    """Build an empty storage for the given layout."""
    if layout is StorageLayout.COLUMN_MAJOR:
        return ColumnMajorStorage(num_columns)
    return RowMajorStorage(num_columns)
