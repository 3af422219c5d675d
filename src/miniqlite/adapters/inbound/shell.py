"""Interactive shell for MiniQLite.

Reads one line at a time, runs it against a DatabaseEngine and prints the
outcome. Lines starting with '.' are meta-commands handled here; everything
else is passed to the engine as a statement.

Meta-commands:
    .tables                 List tables with column and row counts
    .save <file>            Save the database
    .load <file>            Replace the database with a saved file
    .columnstore [on|off]   Layout for new tables (no argument shows it)
    .binary [on|off]        Persistence format (no argument shows it)
    .exit, .quit            Leave the shell

The default database file is loaded at start, when it exists, and saved
on exit. If that file cannot be loaded the shell does not start, so the
file is never overwritten with an empty database.
"""

from __future__ import annotations

import argparse
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path
from typing import Iterable, TextIO

from miniqlite.application import DatabaseEngine, ExecutionResult
from miniqlite.domain.value_objects import PersistenceFormat, StorageLayout
from miniqlite.infrastructure.config import get_config
from miniqlite.infrastructure.logging import get_logger, setup_logging
from miniqlite.infrastructure.metrics import setup_metrics
from miniqlite.infrastructure.tracing import setup_tracing

logger = get_logger(__name__)

PROMPT = "miniqlite> "


def format_result(result: ExecutionResult) -> list[str]:
    """Render a result as output lines.

    Selects print a header and one line per row, cells joined by " | ".
    Everything else prints its message.
    """
    if result.success and result.columns:
        lines = [" | ".join(result.columns)]
        lines.extend(" | ".join(row) for row in result.rows)
        return lines
    return [result.message] if result.message else []


class Shell:
    """Line-oriented front end over a DatabaseEngine."""

    def __init__(self, engine: DatabaseEngine, out: TextIO | None = None) -> None:
        self._engine = engine
        self._out = out or sys.stdout

    @property
    def engine(self) -> DatabaseEngine:
        return self._engine

    def _print(self, line: str = "") -> None:
        print(line, file=self._out)

    def handle(self, line: str) -> bool:
        """Process one input line.

        Returns:
            True when the shell should exit.
        """
        line = line.strip()
        if not line:
            return False

        logger.debug("command_received", command=line)
        if line.startswith("."):
            return self._handle_meta(line)

        for output in format_result(self._engine.execute(line)):
            self._print(output)
        return False

    def run(self, lines: Iterable[str]) -> None:
        """Process lines until one of them asks to exit."""
        for line in lines:
            if self.handle(line):
                break

    def repl(self) -> None:
        """Prompt for lines on the terminal until EOF or an exit command."""
        while True:
            try:
                line = input(PROMPT)
            except EOFError:
                self._print()
                break
            if self.handle(line):
                break

    def _handle_meta(self, line: str) -> bool:
        command, _, arg = line.partition(" ")
        arg = arg.strip()

        if command in (".exit", ".quit"):
            return True
        elif command == ".tables":
            self._print("Tables:")
            for table in self._engine.list_tables():
                self._print(f"  {table.name} ({table.num_columns} columns, {table.num_rows} rows)")
        elif command == ".save":
            if not arg:
                self._print("Usage: .save <filename>")
            else:
                self._print(self._engine.save(arg).message)
        elif command == ".load":
            if not arg:
                self._print("Usage: .load <filename>")
            else:
                self._print(self._engine.load(arg).message)
        elif command == ".columnstore":
            self._toggle_layout(arg)
        elif command == ".binary":
            self._toggle_format(arg)
        else:
            self._print(f"Unrecognized meta-command: {line}")
        return False

    def _toggle_layout(self, arg: str) -> None:
        if arg == "on":
            self._engine.set_layout(StorageLayout.COLUMN_MAJOR)
            self._print("Column-major storage mode ON.")
        elif arg == "off":
            self._engine.set_layout(StorageLayout.ROW_MAJOR)
            self._print("Row-major storage mode ON.")
        elif arg:
            self._print("Usage: .columnstore [on|off]")
        else:
            mode = "column-major" if self._engine.layout is StorageLayout.COLUMN_MAJOR else "row-major"
            self._print(f"Current storage mode: {mode}")

    def _toggle_format(self, arg: str) -> None:
        if arg == "on":
            self._engine.set_format(PersistenceFormat.BINARY)
            self._print("Binary storage mode ON.")
        elif arg == "off":
            self._engine.set_format(PersistenceFormat.TEXT)
            self._print("Binary storage mode OFF.")
        elif arg:
            self._print("Usage: .binary [on|off]")
        else:
            mode = "on" if self._engine.persistence_format is PersistenceFormat.BINARY else "off"
            self._print(f"Current binary mode: {mode}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="miniqlite",
        description="MiniQLite - a tiny embedded table store",
    )
    parser.add_argument(
        "--file", "-f",
        type=Path,
        default=None,
        help="Database file loaded at start and saved on exit (default: miniqlite.db)",
    )
    parser.add_argument(
        "--execute", "-e",
        action="append",
        default=[],
        metavar="CMD",
        help="Run a command instead of starting the shell (repeatable)",
    )
    parser.add_argument(
        "--column-store",
        action="store_true",
        help="Create new tables column-major",
    )
    parser.add_argument(
        "--binary",
        action="store_true",
        help="Save and load in the binary format",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Console entry point."""
    args = build_parser().parse_args(argv)
    config = get_config()

    setup_logging(config.observability.log_level, config.observability.log_format)
    setup_tracing(config.observability)
    metrics = None
    if config.observability.metrics_port:
        metrics = setup_metrics(config.observability.metrics_port)

    engine = DatabaseEngine.from_config(config, metrics=metrics)
    if args.column_store:
        engine.set_layout(StorageLayout.COLUMN_MAJOR)
    if args.binary:
        engine.set_format(PersistenceFormat.BINARY)

    db_file: Path = args.file or config.storage.default_file
    if db_file.exists():
        result = engine.load(db_file)
        if not result.success:
            # The engine is empty now; saving on exit would wipe the file.
            print(result.message, file=sys.stderr)
            print(f"Not starting: '{db_file}' was left unchanged.", file=sys.stderr)
            logger.error("startup_load_failed", path=str(db_file), error=str(result.error))
            return 1

    shell = Shell(engine)
    if args.execute:
        shell.run(args.execute)
    else:
        shell.repl()

    result = engine.save(db_file)
    if not result.success:
        print(result.message, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
