"""Exception hierarchy for MiniQLite.

Every failure the engine, the command parser or the persistence codec can
report is a subclass of MiniQLiteError. The `kind` attribute names the
error category so callers can branch on it without importing every class.

Categories:
    - syntax: the command text could not be parsed
    - duplicate_table / unknown_table / unknown_column: catalog lookups
    - arity_mismatch / type_mismatch / invalid_schema: rejected values
    - io_error / format_error: save and load failures
    - resource_exhausted: allocation failure while mutating state
"""

from __future__ import annotations


class MiniQLiteError(Exception):
    """Base class for all MiniQLite errors."""

    kind = "error"


class CommandSyntaxError(MiniQLiteError):
    """The command text is malformed."""

    kind = "syntax"


class UnrecognizedCommand(CommandSyntaxError):
    """No statement keyword matches the start of the command."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Unrecognized command: {command}")


class DuplicateTable(MiniQLiteError):
    """A table with the same name already exists."""

    kind = "duplicate_table"

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table '{table_name}' already exists")


class UnknownTable(MiniQLiteError):
    """The referenced table does not exist."""

    kind = "unknown_table"

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table '{table_name}' does not exist")


class UnknownColumn(MiniQLiteError):
    """The referenced column does not exist in the table."""

    kind = "unknown_column"

    def __init__(self, table_name: str, column_name: str) -> None:
        self.table_name = table_name
        self.column_name = column_name
        super().__init__(f"Unknown column '{column_name}' in table '{table_name}'")


class ArityMismatch(MiniQLiteError):
    """The number of values does not match the number of columns."""

    kind = "arity_mismatch"

    def __init__(self, table_name: str, expected: int, actual: int) -> None:
        self.table_name = table_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Table '{table_name}' expects {expected} values, got {actual}"
        )


class TypeMismatch(MiniQLiteError):
    """A value cannot be converted to its column's declared type."""

    kind = "type_mismatch"

    def __init__(self, column_name: str, type_name: str, value: str) -> None:
        self.column_name = column_name
        self.type_name = type_name
        self.value = value
        super().__init__(
            f"Value {value!r} is not a valid {type_name} for column '{column_name}'"
        )


class InvalidSchema(MiniQLiteError):
    """A table definition is empty or repeats a column name."""

    kind = "invalid_schema"


class PersistenceIoError(MiniQLiteError):
    """Opening, reading or writing a database file failed."""

    kind = "io_error"


class FormatError(MiniQLiteError):
    """A persisted stream is malformed or cannot be encoded."""

    kind = "format_error"


class ResourceExhausted(MiniQLiteError):
    """Memory ran out while executing an operation."""

    kind = "resource_exhausted"
