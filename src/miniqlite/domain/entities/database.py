"""Database entity: the table registry and its mode settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from miniqlite.domain.entities.table import Table
from miniqlite.domain.value_objects import PersistenceFormat, StorageLayout


@dataclass
class DatabaseSettings:
    """Mode switches held by a database instance.

    Attributes:
        active_layout: Layout given to tables created from now on.
        persistence_format: Format used by save and load.
        enforce_types: Reject values that do not fit the declared column type.
    """

    active_layout: StorageLayout = StorageLayout.ROW_MAJOR
    persistence_format: PersistenceFormat = PersistenceFormat.TEXT
    enforce_types: bool = True


@dataclass
class Database:
    """All tables of one database, in creation order."""

    settings: DatabaseSettings = field(default_factory=DatabaseSettings)
    _tables: dict[str, Table] = field(default_factory=dict, repr=False)

    def get(self, name: str) -> Table | None:
        return self._tables.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[Table]:
        return iter(list(self._tables.values()))

    def add(self, table: Table) -> None:
        if table.name in self._tables:
            raise KeyError(table.name)
        self._tables[table.name] = table

    def remove(self, name: str) -> Table:
        table = self._tables.pop(name)
        table.storage.clear()
        return table

    def clear(self) -> None:
        for table in self._tables.values():
            table.storage.clear()
        self._tables.clear()
