"""Integration tests for DatabaseEngine."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from miniqlite.application import DatabaseEngine
from miniqlite.domain.errors import FormatError, PersistenceIoError, UnknownTable
from miniqlite.domain.value_objects import PersistenceFormat, StorageLayout
from miniqlite.infrastructure.metrics import MetricsRegistry


def _sample(metrics: MetricsRegistry, name: str, labels: dict[str, str] | None = None) -> float | None:
    return metrics.registry.get_sample_value(name, labels or {})


@pytest.fixture
def scenario(db: DatabaseEngine) -> DatabaseEngine:
    """Database after the first two inserts of the basic scenario."""
    db.execute("CREATE TABLE t (id INT, name TEXT)")
    db.execute('INSERT INTO t VALUES (1, "a")')
    db.execute('INSERT INTO t VALUES (2, "b")')
    return db


@pytest.mark.integration
class TestScenarios:
    """End-to-end command sequences, run under both layouts."""

    def test_create_insert_select(self, scenario: DatabaseEngine) -> None:
        result = scenario.execute("SELECT * FROM t")

        assert result.success
        assert result.rows == [["1", "a"], ["2", "b"]]

    def test_delete(self, scenario: DatabaseEngine) -> None:
        result = scenario.execute("DELETE FROM t WHERE id = 1")

        assert result.affected_rows == 1
        assert scenario.execute("SELECT * FROM t").rows == [["2", "b"]]

    def test_update(self, scenario: DatabaseEngine) -> None:
        scenario.execute("DELETE FROM t WHERE id = 1")

        result = scenario.execute('UPDATE t SET name = "z" WHERE id = 2')

        assert result.affected_rows == 1
        assert scenario.execute("SELECT * FROM t").rows == [["2", "z"]]

    @pytest.mark.parametrize(
        "command",
        [
            "SELECT * FROM t",
            "INSERT INTO t VALUES (3, c)",
            "UPDATE t SET name = x WHERE id = 1",
            "DELETE FROM t WHERE id = 1",
            "DROP TABLE t",
        ],
    )
    def test_drop_then_unknown_table(self, scenario: DatabaseEngine, command: str) -> None:
        assert scenario.execute("DROP TABLE t").success

        result = scenario.execute(command)

        assert not result.success
        assert isinstance(result.error, UnknownTable)

    def test_failed_commands_change_nothing(self, scenario: DatabaseEngine) -> None:
        for command in [
            "INSERT INTO t VALUES (3)",
            "INSERT INTO t VALUES (x, c)",
            "UPDATE t SET age = 1 WHERE id = 1",
            "UPDATE t SET id = one WHERE id = 1",
            "DELETE FROM t WHERE age = 1",
            "CREATE TABLE t (other TEXT)",
            "DELETE FROM t",
        ]:
            assert not scenario.execute(command).success

        assert scenario.execute("SELECT * FROM t").rows == [["1", "a"], ["2", "b"]]


@pytest.mark.integration
class TestModes:
    """Layout and format switches."""

    def test_layout_switch_keeps_existing_tables_readable(
        self, engine_factory: Callable[..., DatabaseEngine]
    ) -> None:
        db = engine_factory()
        db.execute("CREATE TABLE old (v TEXT)")
        db.execute("INSERT INTO old VALUES (before)")

        db.set_layout(StorageLayout.COLUMN_MAJOR)
        db.execute("INSERT INTO old VALUES (after)")
        db.execute("CREATE TABLE new (v TEXT)")
        db.execute("INSERT INTO new VALUES (x)")

        assert db.execute("SELECT v FROM old").rows == [["before"], ["after"]]
        assert db.database.get("old").layout is StorageLayout.ROW_MAJOR
        assert db.database.get("new").layout is StorageLayout.COLUMN_MAJOR

    def test_get_stats(self, scenario: DatabaseEngine, layout: StorageLayout) -> None:
        stats = scenario.get_stats()

        assert stats["layout"] == layout.value
        assert stats["persistence_format"] == "text"
        assert stats["tables"] == 1
        assert stats["rows"] == 2
        assert stats["commands_executed"] == 3

    def test_execute_many(self, db: DatabaseEngine) -> None:
        results = db.execute_many(["CREATE TABLE t (a INT)", "INSERT INTO t VALUES (1)", "BOGUS"])

        assert [r.success for r in results] == [True, True, False]


@pytest.mark.integration
class TestPersistence:
    """Save/load through the engine facade."""

    @pytest.mark.parametrize("fmt", list(PersistenceFormat), ids=lambda f: f.value)
    def test_round_trip(
        self,
        scenario: DatabaseEngine,
        engine_factory: Callable[..., DatabaseEngine],
        temp_dir: Path,
        fmt: PersistenceFormat,
    ) -> None:
        scenario.execute("CREATE TABLE prices (item TEXT, amount FLOAT)")
        scenario.execute('INSERT INTO prices VALUES ("tea, green", 2.5)')
        scenario.execute('INSERT INTO prices VALUES ("", "")')
        path = temp_dir / "db"

        assert scenario.save(path, fmt).success

        restored = engine_factory(layout=StorageLayout.COLUMN_MAJOR)
        assert restored.load(path, fmt).success
        assert restored.list_tables() == scenario.list_tables()
        assert restored.execute("SELECT * FROM t").rows == [["1", "a"], ["2", "b"]]
        assert restored.execute("SELECT * FROM prices").rows == [
            ["tea, green", "2.5"],
            ["", ""],
        ]

    def test_format_follows_setting(
        self,
        scenario: DatabaseEngine,
        engine_factory: Callable[..., DatabaseEngine],
        temp_dir: Path,
    ) -> None:
        path = temp_dir / "db"
        scenario.set_format(PersistenceFormat.BINARY)
        scenario.save(path)

        text_reader = engine_factory()
        binary_reader = engine_factory(fmt=PersistenceFormat.BINARY)

        assert not text_reader.load(path).success
        assert binary_reader.load(path).success
        assert binary_reader.execute("SELECT name FROM t").rows == [["a"], ["b"]]

    def test_binary_keeps_tabs_and_newlines(
        self, engine_factory: Callable[..., DatabaseEngine], temp_dir: Path
    ) -> None:
        db = engine_factory(fmt=PersistenceFormat.BINARY)
        db.execute("CREATE TABLE notes (body TEXT)")
        db.storage.insert_row("notes", ["one\ttwo\nthree"])
        path = temp_dir / "db"

        db.save(path)
        db.execute("DROP TABLE notes")
        db.load(path)

        assert db.execute("SELECT body FROM notes").rows == [["one\ttwo\nthree"]]

    def test_text_newline_value_does_not_reload(
        self, engine_factory: Callable[..., DatabaseEngine], temp_dir: Path
    ) -> None:
        db = engine_factory()
        db.execute("CREATE TABLE notes (body TEXT)")
        db.storage.insert_row("notes", ["one\ntwo"])
        path = temp_dir / "db"

        assert db.save(path).success
        result = db.load(path)

        assert isinstance(result.error, FormatError)
        assert len(db.database) == 0

    def test_failed_load_leaves_database_empty(
        self, scenario: DatabaseEngine, temp_dir: Path
    ) -> None:
        path = temp_dir / "garbage"
        path.write_bytes(b"MINIQLITE 1\nTABLE_COUNT 3\nTABLE x 1 0\nCOLUMN a INT\n")

        result = scenario.load(path)

        assert not result.success
        assert result.message.startswith(f"Error loading from '{path}'")
        assert scenario.list_tables() == []

    def test_save_to_unwritable_path(self, scenario: DatabaseEngine, temp_dir: Path) -> None:
        result = scenario.save(temp_dir / "no" / "such" / "dir" / "db")

        assert isinstance(result.error, PersistenceIoError)
        assert result.error.kind == "io_error"


@pytest.mark.integration
class TestMetrics:
    """Metrics recorded by the engine."""

    def test_command_metrics(
        self, engine_factory: Callable[..., DatabaseEngine], metrics_registry: MetricsRegistry
    ) -> None:
        db = engine_factory()
        db.execute("CREATE TABLE t (a INT)")
        db.execute("INSERT INTO t VALUES (1)")
        db.execute("INSERT INTO t VALUES (2)")
        db.execute("INSERT INTO t VALUES (x)")
        db.execute("NONSENSE")

        commands = "miniqlite_commands_total"
        assert _sample(metrics_registry, commands, {"statement": "insert", "status": "success"}) == 2
        assert _sample(metrics_registry, commands, {"statement": "insert", "status": "error"}) == 1
        assert _sample(metrics_registry, commands, {"statement": "unknown", "status": "error"}) == 1
        assert _sample(
            metrics_registry, "miniqlite_rows_affected_total", {"operation": "insert"}
        ) == 2
        assert _sample(metrics_registry, "miniqlite_tables") == 1

    def test_persistence_metrics(
        self,
        scenario: DatabaseEngine,
        metrics_registry: MetricsRegistry,
        temp_dir: Path,
    ) -> None:
        path = temp_dir / "db"
        scenario.save(path)

        written = _sample(
            metrics_registry,
            "miniqlite_persistence_bytes_total",
            {"direction": "save", "format": "text"},
        )
        assert written == path.stat().st_size
