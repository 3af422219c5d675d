"""Query executor.

This module maps parsed plans onto StorageEngine operations and reports
each outcome as an ExecutionResult. Engine errors never escape execute();
they come back as a failed result carrying the error instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from miniqlite.adapters.inbound.command_parser import (
    CreateTablePlan,
    DeletePlan,
    DropTablePlan,
    InsertPlan,
    Plan,
    SelectPlan,
    StatementType,
    UpdatePlan,
)
from miniqlite.domain.errors import MiniQLiteError
from miniqlite.domain.services import StorageEngine
from miniqlite.domain.value_objects import StorageLayout

_LAYOUT_NAMES = {
    StorageLayout.ROW_MAJOR: "row-major",
    StorageLayout.COLUMN_MAJOR: "column-major",
}


@dataclass
class ExecutionResult:
    """Result of executing one command."""

    rows: list[list[str]] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    affected_rows: int = 0
    message: str = ""
    error: MiniQLiteError | None = None
    statement: StatementType | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(
        cls, error: MiniQLiteError, statement: StatementType | None = None
    ) -> ExecutionResult:
        return cls(message=f"Error: {error}", error=error, statement=statement)


class QueryExecutor:
    """Executes plans against a StorageEngine."""

    def __init__(self, engine: StorageEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> StorageEngine:
        return self._engine

    def execute(self, plan: Plan) -> ExecutionResult:
        """Execute a plan.

        Args:
            plan: The plan to execute.

        Returns:
            ExecutionResult with rows and/or status message. A failed
            command has `success` False and the error attached.
        """
        try:
            if isinstance(plan, SelectPlan):
                return self._execute_select(plan)
            elif isinstance(plan, InsertPlan):
                return self._execute_insert(plan)
            elif isinstance(plan, UpdatePlan):
                return self._execute_update(plan)
            elif isinstance(plan, DeletePlan):
                return self._execute_delete(plan)
            elif isinstance(plan, CreateTablePlan):
                return self._execute_create_table(plan)
            elif isinstance(plan, DropTablePlan):
                return self._execute_drop_table(plan)
            else:
                raise TypeError(f"Unsupported plan type: {type(plan).__name__}")
        except MiniQLiteError as e:
            return ExecutionResult.failure(e, plan.statement_type)

    def _execute_select(self, plan: SelectPlan) -> ExecutionResult:
        if plan.predicate is not None:
            result = self._engine.select_where_eq(
                plan.table_name,
                plan.columns,
                plan.predicate.column,
                plan.predicate.value,
            )
        elif plan.columns is None:
            result = self._engine.select_all(plan.table_name)
        else:
            result = self._engine.select_columns(plan.table_name, plan.columns)

        return ExecutionResult(
            rows=result.rows,
            columns=result.columns,
            message=f"{len(result)} row(s) selected.",
            statement=plan.statement_type,
        )

    def _execute_insert(self, plan: InsertPlan) -> ExecutionResult:
        self._engine.insert_row(plan.table_name, plan.values)
        layout = self._engine.database.get(plan.table_name).layout
        return ExecutionResult(
            affected_rows=1,
            message=f"1 row inserted into '{plan.table_name}' ({_LAYOUT_NAMES[layout]} mode).",
            statement=plan.statement_type,
        )

    def _execute_update(self, plan: UpdatePlan) -> ExecutionResult:
        count = self._engine.update_where_eq(
            plan.table_name,
            plan.assignment.column,
            plan.assignment.value,
            plan.predicate.column,
            plan.predicate.value,
        )
        return ExecutionResult(
            affected_rows=count,
            message=f"{count} row(s) updated in '{plan.table_name}'.",
            statement=plan.statement_type,
        )

    def _execute_delete(self, plan: DeletePlan) -> ExecutionResult:
        count = self._engine.delete_where_eq(
            plan.table_name, plan.predicate.column, plan.predicate.value
        )
        return ExecutionResult(
            affected_rows=count,
            message=f"{count} row(s) deleted from '{plan.table_name}'.",
            statement=plan.statement_type,
        )

    def _execute_create_table(self, plan: CreateTablePlan) -> ExecutionResult:
        table = self._engine.create_table(plan.table_name, plan.columns)
        return ExecutionResult(
            message=f"Table '{table.name}' created with {table.num_columns} columns.",
            statement=plan.statement_type,
        )

    def _execute_drop_table(self, plan: DropTablePlan) -> ExecutionResult:
        self._engine.drop_table(plan.table_name)
        return ExecutionResult(
            message=f"Table '{plan.table_name}' dropped.",
            statement=plan.statement_type,
        )
