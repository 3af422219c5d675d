"""Domain services for business logic.

Services implement domain logic that doesn't naturally fit within a single
entity. They coordinate between entities and value objects to perform
operations.
"""

from miniqlite.domain.services.storage_engine import (
    SelectResult,
    StorageEngine,
    TableSummary,
)

__all__ = [
    "StorageEngine",
    "SelectResult",
    "TableSummary",
]
