"""Table entity: a named schema plus the storage holding its rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

from miniqlite.domain.entities.table_storage import TableStorage, create_storage
from miniqlite.domain.value_objects import ColumnDef, StorageLayout


@dataclass
class Table:
    """A table in the database.

    The storage layout is chosen when the table is created and never changes,
    so every row of a table lives in the same representation.

    Example:
        >>> t = Table.create("t", [ColumnDef("id", ColumnType.INT)], StorageLayout.ROW_MAJOR)
        >>> t.storage.append(["1"])
        >>> t.num_rows
        1
    """

    name: str
    columns: tuple[ColumnDef, ...]
    storage: TableStorage = field(repr=False)

    @classmethod
    def create(
        cls, name: str, columns: Sequence[ColumnDef], layout: StorageLayout
    ) -> Table:
        """Create an empty table using the given layout."""
        cols = tuple(columns)
        return cls(name=name, columns=cols, storage=create_storage(layout, len(cols)))

    @property
    def layout(self) -> StorageLayout:
        return self.storage.layout

    @property
    def num_columns(self) -> int:
        return len(self.columns)

    @property
    def num_rows(self) -> int:
        return len(self.storage)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column_index(self, name: str) -> int | None:
        """Position of the first column named `name` (case-sensitive)."""
        for i, column in enumerate(self.columns):
            if column.name == name:
                return i
        return None

    def rows(self) -> Iterator[list[str]]:
        """Iterate over rows in insertion order."""
        return iter(self.storage)
