"""Inbound adapters for MiniQLite.

Inbound adapters handle incoming requests and convert them to
internal domain operations.

Exports:
    Command Parser:
        - CommandParser: Parser that converts command lines to plans
        - Plan: Base class for all plans
        - EqualityPredicate: `column = value` used by WHERE and SET

The interactive shell lives in miniqlite.adapters.inbound.shell and is
not imported here.
"""

from miniqlite.adapters.inbound.command_parser import (
    CommandParser,
    CreateTablePlan,
    DeletePlan,
    DropTablePlan,
    EqualityPredicate,
    InsertPlan,
    Plan,
    SelectPlan,
    StatementType,
    UpdatePlan,
)

__all__ = [
    "CommandParser",
    "StatementType",
    "EqualityPredicate",
    # Plans
    "Plan",
    "CreateTablePlan",
    "InsertPlan",
    "SelectPlan",
    "UpdatePlan",
    "DeletePlan",
    "DropTablePlan",
]
