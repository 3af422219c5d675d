"""Storage engine: table registry operations and equality queries.

The engine executes one validated operation at a time against a Database.
Every operation either completes or raises a MiniQLiteError before touching
any row, so a failed call never leaves a table partially modified.

Query code reads cells only through TableStorage.cell(row, column); the
row-major and column-major layouts share every code path below.

Predicates are exact string equality on the stored cell text.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from miniqlite.domain.entities import Database, Table
from miniqlite.domain.errors import (
    ArityMismatch,
    DuplicateTable,
    InvalidSchema,
    ResourceExhausted,
    TypeMismatch,
    UnknownColumn,
    UnknownTable,
)
from miniqlite.domain.value_objects import ColumnDef
from miniqlite.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SelectResult:
    """Rows produced by a select, projected to `columns`."""

    columns: list[str]
    rows: list[list[str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class TableSummary:
    """Name and size of one table."""

    name: str
    num_columns: int
    num_rows: int


@contextmanager
def _no_memory_exit() -> Iterator[None]:
    """Report allocation failure as a recoverable error."""
    try:
        yield
    except MemoryError as e:
        raise ResourceExhausted("Out of memory") from e


class StorageEngine:
    """Executes table operations against a Database.

    Example:
        >>> engine = StorageEngine()
        >>> engine.create_table("t", [ColumnDef("id", ColumnType.INT)])
        >>> engine.insert_row("t", ["1"])
        >>> engine.select_all("t").rows
        [['1']]
    """

    def __init__(self, database: Database | None = None) -> None:
        self._db = database if database is not None else Database()

    @property
    def database(self) -> Database:
        return self._db

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def create_table(self, name: str, columns: Sequence[ColumnDef]) -> Table:
        """Create an empty table in the currently active layout.

        Raises:
            DuplicateTable: A table with this name exists.
            InvalidSchema: No columns, or a repeated column name.
        """
        if name in self._db:
            raise DuplicateTable(name)
        if not columns:
            raise InvalidSchema(f"Table '{name}' must have at least one column")
        seen: set[str] = set()
        for column in columns:
            if column.name in seen:
                raise InvalidSchema(
                    f"Duplicate column '{column.name}' in table '{name}'"
                )
            seen.add(column.name)

        with _no_memory_exit():
            table = Table.create(name, columns, self._db.settings.active_layout)
            self._db.add(table)

        logger.info(
            "table_created",
            table=name,
            columns=table.num_columns,
            layout=table.layout.value,
        )
        return table

    def drop_table(self, name: str) -> None:
        """Remove a table and all of its rows.

        Raises:
            UnknownTable: No such table.
        """
        if name not in self._db:
            raise UnknownTable(name)
        self._db.remove(name)
        logger.info("table_dropped", table=name)

    def list_tables(self) -> list[TableSummary]:
        """Summaries of all tables in creation order."""
        return [TableSummary(t.name, t.num_columns, t.num_rows) for t in self._db]

    def clear(self) -> None:
        """Drop every table."""
        self._db.clear()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert_row(self, table_name: str, values: Sequence[str]) -> None:
        """Append one row.

        Raises:
            UnknownTable: No such table.
            ArityMismatch: Wrong number of values.
            TypeMismatch: A value does not fit its column's declared type.
        """
        table = self._table(table_name)
        if len(values) != table.num_columns:
            raise ArityMismatch(table_name, table.num_columns, len(values))
        for column, value in zip(table.columns, values):
            self._check_type(column, value)

        with _no_memory_exit():
            table.storage.append([str(v) for v in values])
        logger.debug("row_inserted", table=table_name, layout=table.layout.value)

    def delete_where_eq(self, table_name: str, where_col: str, where_val: str) -> int:
        """Delete every row whose `where_col` cell equals `where_val`.

        Survivors keep their relative order.

        Returns:
            Number of rows removed (zero is not an error).
        """
        table = self._table(table_name)
        where_idx = self._column(table, where_col)

        keep = [
            table.storage.cell(r, where_idx) != where_val
            for r in range(table.num_rows)
        ]
        removed = keep.count(False)
        if removed:
            with _no_memory_exit():
                table.storage.retain(keep)

        logger.info("rows_deleted", table=table_name, count=removed)
        return removed

    def update_where_eq(
        self,
        table_name: str,
        set_col: str,
        set_val: str,
        where_col: str,
        where_val: str,
    ) -> int:
        """Set `set_col` to `set_val` in every row where `where_col` equals `where_val`.

        Returns:
            Number of rows updated.
        """
        table = self._table(table_name)
        where_idx = self._column(table, where_col)
        set_idx = self._column(table, set_col)
        self._check_type(table.columns[set_idx], set_val)

        matches = self._matching_rows(table, where_idx, where_val)
        for r in matches:
            table.storage.set_cell(r, set_idx, set_val)

        logger.info("rows_updated", table=table_name, count=len(matches))
        return len(matches)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def select_all(self, table_name: str) -> SelectResult:
        """All columns of all rows."""
        table = self._table(table_name)
        return self._project(table, list(range(table.num_columns)), None)

    def select_columns(self, table_name: str, column_names: Sequence[str]) -> SelectResult:
        """The named columns of all rows, in the requested order."""
        table = self._table(table_name)
        indices = [self._column(table, c) for c in column_names]
        return self._project(table, indices, None)

    def select_where_eq(
        self,
        table_name: str,
        column_names: Sequence[str] | None,
        where_col: str,
        where_val: str,
    ) -> SelectResult:
        """The named columns (all if None) of rows where `where_col` equals `where_val`."""
        table = self._table(table_name)
        where_idx = self._column(table, where_col)
        if column_names is None:
            indices = list(range(table.num_columns))
        else:
            indices = [self._column(table, c) for c in column_names]
        return self._project(table, indices, (where_idx, where_val))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _table(self, name: str) -> Table:
        table = self._db.get(name)
        if table is None:
            raise UnknownTable(name)
        return table

    def _column(self, table: Table, name: str) -> int:
        idx = table.column_index(name)
        if idx is None:
            raise UnknownColumn(table.name, name)
        return idx

    def _check_type(self, column: ColumnDef, value: str) -> None:
        if self._db.settings.enforce_types and not column.column_type.accepts(value):
            raise TypeMismatch(column.name, column.column_type.keyword, value)

    @staticmethod
    def _matching_rows(table: Table, where_idx: int, where_val: str) -> list[int]:
        storage = table.storage
        return [r for r in range(len(storage)) if storage.cell(r, where_idx) == where_val]

    @staticmethod
    def _project(
        table: Table, indices: list[int], predicate: tuple[int, str] | None
    ) -> SelectResult:
        storage = table.storage
        if predicate is None:
            row_ids: Sequence[int] = range(len(storage))
        else:
            row_ids = StorageEngine._matching_rows(table, *predicate)

        with _no_memory_exit():
            rows = [[storage.cell(r, c) for c in indices] for r in row_ids]
        return SelectResult(columns=[table.columns[c].name for c in indices], rows=rows)
