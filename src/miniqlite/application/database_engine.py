"""Database Engine - Unified entry point for MiniQLite.

This module provides the DatabaseEngine class that ties together the
command parser, the query executor, the storage engine and file
persistence behind a small execute/save/load interface.

Usage:
    from miniqlite.application import DatabaseEngine

    db = DatabaseEngine()
    db.execute("CREATE TABLE users (id INT, name TEXT)")
    db.execute('INSERT INTO users VALUES (1, "Alice")')
    result = db.execute("SELECT * FROM users")

    db.save("users.db")
    db.load("users.db")
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

from miniqlite.adapters.inbound.command_parser import CommandParser, StatementType
from miniqlite.adapters.outbound.file_persistence import FilePersistence
from miniqlite.application.executor import ExecutionResult, QueryExecutor
from miniqlite.domain.entities import Database, DatabaseSettings
from miniqlite.domain.errors import MiniQLiteError
from miniqlite.domain.services import StorageEngine, TableSummary
from miniqlite.domain.value_objects import PersistenceFormat, StorageLayout
from miniqlite.infrastructure.config import Config, get_config
from miniqlite.infrastructure.logging import get_logger
from miniqlite.infrastructure.metrics import MetricsRegistry, get_metrics
from miniqlite.infrastructure.tracing import trace_span

logger = get_logger(__name__)

_AFFECTED_OPERATIONS = {
    StatementType.INSERT: "insert",
    StatementType.UPDATE: "update",
    StatementType.DELETE: "delete",
}


class DatabaseEngine:
    """Main entry point that owns one in-memory database.

    Commands never raise: every outcome, including parse errors and failed
    saves or loads, is returned as an ExecutionResult.

    Thread Safety:
        None. A DatabaseEngine is meant for a single caller.
    """

    def __init__(
        self,
        settings: DatabaseSettings | None = None,
        metrics: MetricsRegistry | None = None,
        persistence: FilePersistence | None = None,
    ) -> None:
        """Initialize the database engine.

        Args:
            settings: Initial mode switches. Defaults to row-major layout
                and the text format.
            metrics: Metrics registry. Defaults to the global registry.
            persistence: File persistence adapter.
        """
        self._database = Database(settings=settings or DatabaseSettings())
        self._storage = StorageEngine(self._database)
        self._parser = CommandParser()
        self._executor = QueryExecutor(self._storage)
        self._persistence = persistence or FilePersistence()
        self._metrics = metrics or get_metrics()
        self._commands_executed = 0

    @classmethod
    def from_config(
        cls, config: Config | None = None, metrics: MetricsRegistry | None = None
    ) -> DatabaseEngine:
        """Create an engine with settings taken from configuration."""
        config = config or get_config()
        settings = DatabaseSettings(
            active_layout=StorageLayout(config.storage.layout),
            persistence_format=PersistenceFormat(config.storage.persistence_format),
            enforce_types=config.storage.enforce_types,
        )
        return cls(settings=settings, metrics=metrics)

    @property
    def database(self) -> Database:
        return self._database

    @property
    def storage(self) -> StorageEngine:
        return self._storage

    @property
    def layout(self) -> StorageLayout:
        return self._database.settings.active_layout

    @property
    def persistence_format(self) -> PersistenceFormat:
        return self._database.settings.persistence_format

    def set_layout(self, layout: StorageLayout) -> None:
        """Set the layout for tables created from now on.

        Existing tables keep the layout they were created with.
        """
        self._database.settings.active_layout = layout
        logger.info("layout_changed", layout=layout.value)

    def set_format(self, fmt: PersistenceFormat) -> None:
        """Set the format used by save and load."""
        self._database.settings.persistence_format = fmt
        logger.info("persistence_format_changed", format=fmt.value)

    def execute(self, command: str) -> ExecutionResult:
        """Parse and execute one command.

        Args:
            command: The command text.

        Returns:
            ExecutionResult with rows and/or status message.
        """
        start = time.perf_counter()
        try:
            plan = self._parser.parse(command)
        except MiniQLiteError as e:
            result = ExecutionResult.failure(e)
        else:
            result = self._executor.execute(plan)

        self._record_command(result, time.perf_counter() - start)
        if not result.success:
            logger.debug("command_failed", kind=result.error.kind, error=str(result.error))
        return result

    def execute_many(self, commands: list[str]) -> list[ExecutionResult]:
        """Execute multiple commands in order."""
        return [self.execute(command) for command in commands]

    def save(self, path: str | Path, fmt: PersistenceFormat | None = None) -> ExecutionResult:
        """Write the whole database to `path`.

        Args:
            path: Destination file.
            fmt: Format to write. Defaults to the database's format.
        """
        fmt = fmt or self.persistence_format
        start = time.perf_counter()
        with trace_span("save", {"path": str(path), "format": fmt.value}):
            try:
                written = self._persistence.save(self._storage, path, fmt)
            except MiniQLiteError as e:
                return ExecutionResult(
                    message=f"Error saving to '{path}': {e}", error=e
                )

        self._metrics.persistence_bytes_total.labels(direction="save", format=fmt.value).inc(written)
        self._metrics.persistence_latency_seconds.labels(direction="save").observe(
            time.perf_counter() - start
        )
        return ExecutionResult(message=f"Saved to '{path}'.")

    def load(self, path: str | Path, fmt: PersistenceFormat | None = None) -> ExecutionResult:
        """Replace the database with the contents of `path`.

        On failure the database is left empty.

        Args:
            path: Source file.
            fmt: Format to read. Defaults to the database's format.
        """
        fmt = fmt or self.persistence_format
        start = time.perf_counter()
        with trace_span("load", {"path": str(path), "format": fmt.value}):
            try:
                read = self._persistence.load(self._storage, path, fmt)
            except MiniQLiteError as e:
                self._metrics.tables.set(0)
                return ExecutionResult(
                    message=f"Error loading from '{path}': {e}", error=e
                )

        self._metrics.tables.set(len(self._database))
        self._metrics.persistence_bytes_total.labels(direction="load", format=fmt.value).inc(read)
        self._metrics.persistence_latency_seconds.labels(direction="load").observe(
            time.perf_counter() - start
        )
        return ExecutionResult(message=f"Loaded from '{path}'.")

    def list_tables(self) -> list[TableSummary]:
        """Name, column count and row count of every table."""
        return self._storage.list_tables()

    def get_stats(self) -> dict[str, Any]:
        """Get database statistics.

        Returns:
            Dictionary with various statistics.
        """
        tables = self.list_tables()
        return {
            "layout": self.layout.value,
            "persistence_format": self.persistence_format.value,
            "enforce_types": self._database.settings.enforce_types,
            "commands_executed": self._commands_executed,
            "tables": len(tables),
            "rows": sum(t.num_rows for t in tables),
        }

    def _record_command(self, result: ExecutionResult, elapsed: float) -> None:
        self._commands_executed += 1
        statement = result.statement.value if result.statement else "unknown"
        status = "success" if result.success else "error"

        self._metrics.commands_total.labels(statement=statement, status=status).inc()
        self._metrics.command_latency_seconds.labels(statement=statement).observe(elapsed)
        if result.success and result.statement in _AFFECTED_OPERATIONS:
            self._metrics.rows_affected_total.labels(
                operation=_AFFECTED_OPERATIONS[result.statement]
            ).inc(result.affected_rows)
        self._metrics.tables.set(len(self._database))
