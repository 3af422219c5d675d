"""Domain entities for MiniQLite.

Entities are objects with identity that have a lifecycle. Unlike value objects,
two entities with the same attributes may not be equal if they have different
identities.

Exports:
    Storage:
        - TableStorage: Cell storage interface (cell(row, column) accessor)
        - RowMajorStorage: One list per row
        - ColumnMajorStorage: One list per column
        - create_storage: Build an empty storage for a layout

    Table:
        - Table: Named schema plus its storage

    Database:
        - Database: Ordered table registry
        - DatabaseSettings: Layout, persistence format and type enforcement
"""

from miniqlite.domain.entities.database import Database, DatabaseSettings
from miniqlite.domain.entities.table import Table
from miniqlite.domain.entities.table_storage import (
    ColumnMajorStorage,
    RowMajorStorage,
    TableStorage,
    create_storage,
)

__all__ = [
    # Storage
    "TableStorage",
    "RowMajorStorage",
    "ColumnMajorStorage",
    "create_storage",
    # Table
    "Table",
    # Database
    "Database",
    "DatabaseSettings",
]
