"""Application layer for MiniQLite.

The application layer orchestrates domain logic to fulfill use cases and
turns domain errors into structured results.

Exports:
    DatabaseEngine:
        - DatabaseEngine: Main entry point for the database
    Executor:
        - QueryExecutor: Executes parsed plans against the storage engine
        - ExecutionResult: Result of command execution
"""

from miniqlite.application.database_engine import DatabaseEngine
from miniqlite.application.executor import ExecutionResult, QueryExecutor

__all__ = [
    "DatabaseEngine",
    "QueryExecutor",
    "ExecutionResult",
]
