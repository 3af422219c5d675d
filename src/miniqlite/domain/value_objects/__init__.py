"""Value objects for the MiniQLite domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Column types:
        - ColumnType: Declared type of a column (INT, TEXT, FLOAT)
        - ColumnDef: Column name plus declared type
        - MAX_NAME_LEN: Size of a binary name block

    Modes:
        - StorageLayout: Row-major or column-major cell storage
        - PersistenceFormat: Text or binary file format
"""

from miniqlite.domain.value_objects.column_types import (
    MAX_NAME_LEN,
    ColumnDef,
    ColumnType,
)
from miniqlite.domain.value_objects.modes import PersistenceFormat, StorageLayout

__all__ = [
    # Column types
    "ColumnType",
    "ColumnDef",
    "MAX_NAME_LEN",
    # Modes
    "StorageLayout",
    "PersistenceFormat",
]
