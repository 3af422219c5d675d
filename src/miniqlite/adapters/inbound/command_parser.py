"""Command parser for the MiniQLite statement language.

This module turns one command line into a plan that the executor can run.
It is a small hand-written scanner, not a general SQL parser.

Supported statements:
    - CREATE TABLE <name> (<col> <type>, ...)
    - INSERT INTO <name> VALUES (<v1>, <v2>, ...)
    - SELECT <* | col, ...> FROM <name> [WHERE <col> = <val>]
    - UPDATE <name> SET <col> = <val> WHERE <col> = <val>
    - DELETE FROM <name> WHERE <col> = <val>
    - DROP TABLE <name>

Rules:
    - The statement is picked by the first keyword that prefixes the
      trimmed line; keywords are uppercase and case-sensitive.
    - One trailing ';' is ignored.
    - Values may be wrapped in double quotes to keep commas and spaces;
      there is no escape character.
    - DELETE and UPDATE require a WHERE clause.

Any malformed command raises CommandSyntaxError and produces no plan.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from miniqlite.domain.errors import CommandSyntaxError, UnrecognizedCommand
from miniqlite.domain.value_objects import MAX_NAME_LEN, ColumnDef, ColumnType


class StatementType(Enum):
    """Types of statements."""

    CREATE_TABLE = "create_table"
    INSERT = "insert"
    SELECT = "select"
    UPDATE = "update"
    DELETE = "delete"
    DROP_TABLE = "drop_table"


@dataclass(frozen=True)
class EqualityPredicate:
    """`column = value`, compared as exact strings."""

    column: str
    value: str

    def __str__(self) -> str:
        return f'{self.column} = "{self.value}"'


# Plans


@dataclass
class Plan(ABC):
    """Base class for parsed statements."""

    table_name: str

    @property
    @abstractmethod
    def statement_type(self) -> StatementType:
        ...


@dataclass
class CreateTablePlan(Plan):
    """Create a new table."""

    columns: list[ColumnDef] = field(default_factory=list)

    @property
    def statement_type(self) -> StatementType:
        return StatementType.CREATE_TABLE

    def __str__(self) -> str:
        cols = ", ".join(str(c) for c in self.columns)
        return f"CreateTable({self.table_name}, [{cols}])"


@dataclass
class InsertPlan(Plan):
    """Insert one row."""

    values: list[str] = field(default_factory=list)

    @property
    def statement_type(self) -> StatementType:
        return StatementType.INSERT

    def __str__(self) -> str:
        return f"Insert({self.table_name}, values={self.values})"


@dataclass
class SelectPlan(Plan):
    """Select columns (None means all) with an optional equality filter."""

    columns: list[str] | None = None
    predicate: EqualityPredicate | None = None

    @property
    def statement_type(self) -> StatementType:
        return StatementType.SELECT

    def __str__(self) -> str:
        cols = "*" if self.columns is None else ", ".join(self.columns)
        where = f" WHERE {self.predicate}" if self.predicate else ""
        return f"Select({cols} FROM {self.table_name}{where})"


@dataclass
class UpdatePlan(Plan):
    """Set one column in every row matching the predicate."""

    assignment: EqualityPredicate = field(default=None)  # type: ignore[assignment]
    predicate: EqualityPredicate = field(default=None)  # type: ignore[assignment]

    @property
    def statement_type(self) -> StatementType:
        return StatementType.UPDATE

    def __str__(self) -> str:
        return f"Update({self.table_name}, SET {self.assignment} WHERE {self.predicate})"


@dataclass
class DeletePlan(Plan):
    """Delete every row matching the predicate."""

    predicate: EqualityPredicate = field(default=None)  # type: ignore[assignment]

    @property
    def statement_type(self) -> StatementType:
        return StatementType.DELETE

    def __str__(self) -> str:
        return f"Delete({self.table_name} WHERE {self.predicate})"


@dataclass
class DropTablePlan(Plan):
    """Drop a table."""

    @property
    def statement_type(self) -> StatementType:
        return StatementType.DROP_TABLE

    def __str__(self) -> str:
        return f"DropTable({self.table_name})"


# Scanning helpers


class _Scanner:
    """Cursor over a command string."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return "" if self.at_end() else self.text[self.pos]

    def read_identifier(self, stop_chars: str = "") -> str:
        """Read up to whitespace, end of text, or any of `stop_chars`."""
        self.skip_ws()
        start = self.pos
        while not self.at_end():
            ch = self.text[self.pos]
            if ch.isspace() or ch in stop_chars:
                break
            self.pos += 1
        return self.text[start:self.pos]

    def rest(self) -> str:
        return self.text[self.pos:]


def _check_name_length(name: str, what: str) -> None:
    if len(name.encode("utf-8")) >= MAX_NAME_LEN:
        raise CommandSyntaxError(
            f"{what} '{name[:20]}...' is longer than {MAX_NAME_LEN - 1} bytes"
        )


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on `sep` outside of double-quoted sections."""
    parts: list[str] = []
    current: list[str] = []
    in_quote = False
    for ch in text:
        if ch == '"':
            in_quote = not in_quote
        if ch == sep and not in_quote:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def parse_value(text: str) -> str:
    """Parse one literal: a double-quoted string or a bare trimmed word.

    Quotes are removed and their content kept verbatim. An unterminated
    quote keeps everything after it.
    """
    value = text.strip()
    if not value.startswith('"'):
        return value
    body = value[1:]
    end = body.find('"')
    if end == -1:
        return body
    if body[end + 1:].strip():
        raise CommandSyntaxError(f"Unexpected text after quoted value: {value}")
    return body[:end]


def parse_equality(text: str, clause: str) -> EqualityPredicate:
    """Parse `col = value`, splitting on the first '='."""
    eq = text.find("=")
    if eq == -1:
        raise CommandSyntaxError(f"Syntax error in {clause} clause: expected '='")
    column = text[:eq].strip()
    if not column:
        raise CommandSyntaxError(f"Syntax error in {clause} clause: missing column")
    right = text[eq + 1:].strip()
    if right.startswith('"'):
        right = right[1:]
        end = right.find('"')
        if end != -1:
            right = right[:end]
    return EqualityPredicate(column=column, value=right)


def _require_blank(text: str, context: str) -> None:
    if text.strip():
        raise CommandSyntaxError(f"Unexpected text {context}: '{text.strip()}'")


class CommandParser:
    """Parses command lines into plans.

    Example:
        >>> parser = CommandParser()
        >>> plan = parser.parse('SELECT id FROM t WHERE name = "a"')
        >>> print(plan)
        Select(id FROM t WHERE name = "a")
    """

    _KEYWORDS: tuple[tuple[str, str], ...] = (
        ("CREATE TABLE", "_parse_create"),
        ("INSERT INTO", "_parse_insert"),
        ("SELECT", "_parse_select"),
        ("UPDATE", "_parse_update"),
        ("DELETE FROM", "_parse_delete"),
        ("DROP TABLE", "_parse_drop"),
    )

    def parse(self, command: str) -> Plan:
        """Parse one command into a plan.

        Raises:
            UnrecognizedCommand: No statement keyword prefixes the command.
            CommandSyntaxError: The statement is malformed.
        """
        line = command.strip()
        if line.endswith(";"):
            line = line[:-1].rstrip()

        for keyword, handler in self._KEYWORDS:
            if line.startswith(keyword):
                return getattr(self, handler)(line, len(keyword))

        raise UnrecognizedCommand(line)

    def _parse_create(self, line: str, start: int) -> CreateTablePlan:
        scanner = _Scanner(line, start)
        name = scanner.read_identifier("(")
        if not name:
            raise CommandSyntaxError("Syntax error: missing table name")
        _check_name_length(name, "Table name")

        scanner.skip_ws()
        if scanner.peek() != "(":
            raise CommandSyntaxError("Syntax error: expected '('")
        body_start = scanner.pos + 1
        body_end = line.rfind(")")
        if body_end < body_start:
            raise CommandSyntaxError("Syntax error: missing ')'")
        _require_blank(line[body_end + 1:], "after column list")

        columns = []
        for entry in line[body_start:body_end].split(","):
            words = entry.split()
            if not words:
                continue
            if len(words) != 2:
                raise CommandSyntaxError(
                    f"Syntax error in column definition: '{entry.strip()}'"
                )
            _check_name_length(words[0], "Column name")
            columns.append(ColumnDef(words[0], ColumnType.from_keyword(words[1])))

        if not columns:
            raise CommandSyntaxError("Syntax error: no columns")
        return CreateTablePlan(table_name=name, columns=columns)

    def _parse_insert(self, line: str, start: int) -> InsertPlan:
        scanner = _Scanner(line, start)
        name = scanner.read_identifier("(")
        if not name:
            raise CommandSyntaxError("Syntax error: missing table name in INSERT")

        rest = scanner.rest()
        values_kw = rest.find("VALUES")
        if values_kw == -1:
            raise CommandSyntaxError("Syntax error: expected VALUES")
        _require_blank(rest[:values_kw], "before VALUES")

        after = rest[values_kw + len("VALUES"):]
        lp = after.find("(")
        rp = after.rfind(")")
        if lp == -1 or rp <= lp + 1:
            raise CommandSyntaxError("Syntax error: invalid VALUES list")
        _require_blank(after[:lp], "between VALUES and '('")
        _require_blank(after[rp + 1:], "after VALUES list")

        body = after[lp + 1:rp]
        if not body.strip():
            raise CommandSyntaxError("Syntax error: empty VALUES list")
        values = [parse_value(part) for part in split_top_level(body)]
        return InsertPlan(table_name=name, values=values)

    def _parse_select(self, line: str, start: int) -> SelectPlan:
        from_kw = line.find("FROM", start)
        if from_kw == -1:
            raise CommandSyntaxError("Syntax error: missing FROM")

        cols_text = line[start:from_kw].strip()
        if not cols_text:
            raise CommandSyntaxError("Syntax error: missing columns in SELECT")

        scanner = _Scanner(line, from_kw + len("FROM"))
        name = scanner.read_identifier(";")
        if not name:
            raise CommandSyntaxError("Syntax error: missing table name in SELECT")

        columns: list[str] | None
        if cols_text == "*":
            columns = None
        else:
            columns = [c.strip() for c in cols_text.split(",") if c.strip()]
            if not columns:
                raise CommandSyntaxError("Syntax error: missing columns in SELECT")

        rest = scanner.rest()
        where_kw = rest.find("WHERE")
        if where_kw == -1:
            _require_blank(rest, "after table name")
            return SelectPlan(table_name=name, columns=columns)

        _require_blank(rest[:where_kw], "before WHERE")
        predicate = parse_equality(rest[where_kw + len("WHERE"):], "WHERE")
        return SelectPlan(table_name=name, columns=columns, predicate=predicate)

    def _parse_update(self, line: str, start: int) -> UpdatePlan:
        scanner = _Scanner(line, start)
        name = scanner.read_identifier(";")
        if not name:
            raise CommandSyntaxError("Syntax error: missing table name in UPDATE")

        rest = scanner.rest()
        set_kw = rest.find("SET")
        where_kw = rest.find("WHERE")
        if set_kw == -1 or where_kw == -1 or where_kw < set_kw:
            raise CommandSyntaxError("Syntax error: invalid UPDATE, expected SET ... WHERE ...")
        _require_blank(rest[:set_kw], "before SET")

        assignment = parse_equality(rest[set_kw + len("SET"):where_kw], "SET")
        predicate = parse_equality(rest[where_kw + len("WHERE"):], "WHERE")
        return UpdatePlan(table_name=name, assignment=assignment, predicate=predicate)

    def _parse_delete(self, line: str, start: int) -> DeletePlan:
        scanner = _Scanner(line, start)
        name = scanner.read_identifier(";")
        if not name:
            raise CommandSyntaxError("Syntax error: missing table name in DELETE")

        rest = scanner.rest()
        where_kw = rest.find("WHERE")
        if where_kw == -1:
            raise CommandSyntaxError("Syntax error: DELETE without WHERE not supported")
        _require_blank(rest[:where_kw], "before WHERE")

        predicate = parse_equality(rest[where_kw + len("WHERE"):], "WHERE")
        return DeletePlan(table_name=name, predicate=predicate)

    def _parse_drop(self, line: str, start: int) -> DropTablePlan:
        words = line[start:].split()
        if not words:
            raise CommandSyntaxError("Syntax error in DROP TABLE: missing table name")
        if len(words) > 1:
            raise CommandSyntaxError("Syntax error in DROP TABLE: unexpected text after name")
        name = words[0]
        if name.endswith(";"):
            name = name[:-1]
        if not name:
            raise CommandSyntaxError("Syntax error in DROP TABLE: missing table name")
        return DropTablePlan(table_name=name)
