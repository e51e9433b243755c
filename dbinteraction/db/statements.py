"""
SQL statement builder - pure functions from (QueryType, structural parts) to a parameterized statement.
Challenge: Keep the enum-driven templates while never concatenating caller values into SQL.
Design: Table/column/condition names are checked against an identifier pattern (or passed
explicitly as RawSql); every value becomes a bind parameter.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from dbinteraction.core.errors import DataAccessError, ErrorKind
from dbinteraction.db.enums import TABLE_NAMES, DatabaseTables, QueryType

# Name or qualified.Name (schema.table, alias.column)
IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
PARAM_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
# :name, but not a ::cast
_BIND = re.compile(r"(?<![:\w]):([A-Za-z_][A-Za-z0-9_]*)")

_WHERE_OPERATORS = {
    QueryType.SELECT_WHERE: "=",
    QueryType.SELECT_WHERE_LIKE: "LIKE",
}


class RawSql(str):
    """SQL text the caller vouches for. Used verbatim (joins, sub-selects, full statements)."""


@dataclass(frozen=True)
class Statement:
    text: str
    params: dict[str, Any] = field(default_factory=dict)

    def preview(self) -> str:
        """Statement with bound values inlined verbatim. For logs only; never executed."""

        def _inline(match: re.Match) -> str:
            name = match.group(1)
            return str(self.params[name]) if name in self.params else match.group(0)

        return _BIND.sub(_inline, self.text)


def _invalid(message: str) -> DataAccessError:
    return DataAccessError(message, kind=ErrorKind.INVALID_QUERY)


def check_identifier(name: str, what: str = "identifier") -> str:
    """Return name stripped, or raise if it is not a plain (optionally qualified) identifier."""
    stripped = name.strip() if isinstance(name, str) else ""
    if not IDENTIFIER.match(stripped):
        raise _invalid(f"invalid {what}: {name!r}")
    return stripped


def resolve_table(table: DatabaseTables | str | None) -> str:
    """Map a logical table to its physical name; RawSql passes through, plain str is validated."""
    if table is None:
        raise _invalid("a table is required")
    if isinstance(table, DatabaseTables):
        return TABLE_NAMES[table]
    if isinstance(table, RawSql):
        if not table.strip():
            raise _invalid("raw table text is empty")
        return str(table)
    return check_identifier(table, "table name")


def _column_names(columns: str | Sequence[str]) -> list[str]:
    parts = columns.split(",") if isinstance(columns, str) else list(columns)
    names = []
    for part in parts:
        if isinstance(part, str) and part.strip() == "*":
            names.append("*")
        else:
            names.append(check_identifier(part, "column name"))
    return names


def render_columns(columns: str | Sequence[str]) -> str:
    """Column list as SQL text. A str keeps its own spacing once every name is valid."""
    if isinstance(columns, RawSql):
        return str(columns)
    if not columns:
        raise _invalid("at least one column is required")
    names = _column_names(columns)
    if isinstance(columns, str):
        return columns.strip()
    return ", ".join(names)


def _where_value(value: Any) -> Any:
    if value is None:
        raise _invalid("a value is required for the WHERE clause")
    return value


def build_statement(
    query_type: QueryType,
    table: DatabaseTables | str | None = None,
    columns: str | Sequence[str] = "",
    condition: str = "",
    value: Any = None,
    values: Sequence[Any] | Mapping[str, Any] | None = None,
    uses_pseudonym: bool = False,
) -> Statement:
    """
    Build the statement for query_type. Templates (values shown as bind parameters):
      Select              SELECT {columns} FROM {table};
      Delete              DELETE FROM {table} WHERE {condition} = :value;
      Insert              INSERT INTO {table}({columns}) VALUES (:v0, ...);
      Update              UPDATE {table} SET Col = :set_0, ... WHERE {condition} = :value;
      SelectWhere         SELECT {columns} FROM {table} WHERE {condition} = :value;
      SelectWhereLike     ... WHERE {condition} LIKE :value;
      SelectWhereBetween  ... WHERE {condition} BETWEEN :value_low AND :value_high;
      Transaction         table text is the whole statement; values (mapping) are its parameters.
    """
    try:
        query_type = QueryType(query_type)
    except ValueError:
        raise _invalid(f"unknown query type: {query_type!r}") from None

    if query_type is QueryType.TRANSACTION:
        if not isinstance(table, str) or isinstance(table, DatabaseTables) or not table.strip():
            raise _invalid("a transaction needs the full statement as its table text")
        if values is not None and not isinstance(values, Mapping):
            raise _invalid("transaction parameters must be a mapping")
        return Statement(str(table), dict(values or {}))

    target = resolve_table(table)
    if uses_pseudonym:
        # Users -> Users AS u
        target = f"{target} AS {target.strip()[0].lower()}"

    if query_type is QueryType.SELECT:
        return Statement(f"SELECT {render_columns(columns)} FROM {target};")

    if query_type is QueryType.INSERT:
        if isinstance(values, Mapping):
            if columns:
                raise _invalid("pass insert columns either as mapping keys or as columns, not both")
            columns = list(values.keys())
            values = list(values.values())
        if not isinstance(values, Sequence) or isinstance(values, (str, bytes)):
            raise _invalid("insert values must be a sequence aligned with the columns")
        column_text = render_columns(columns)
        if not isinstance(columns, RawSql) and len(_column_names(columns)) != len(values):
            raise _invalid("insert columns and values differ in length")
        params = {f"v{i}": v for i, v in enumerate(values)}
        placeholders = ", ".join(f":{name}" for name in params)
        return Statement(f"INSERT INTO {target}({column_text}) VALUES ({placeholders});", params)

    where = check_identifier(condition, "condition column")

    if query_type is QueryType.DELETE:
        return Statement(
            f"DELETE FROM {target} WHERE {where} = :value;", {"value": _where_value(value)}
        )

    if query_type is QueryType.UPDATE:
        if not isinstance(values, Mapping) or not values:
            raise _invalid("update values must be a non-empty mapping of column to value")
        params = {}
        assignments = []
        for i, (column, new_value) in enumerate(values.items()):
            assignments.append(f"{check_identifier(column, 'column name')} = :set_{i}")
            params[f"set_{i}"] = new_value
        params["value"] = _where_value(value)
        return Statement(
            f"UPDATE {target} SET {', '.join(assignments)} WHERE {where} = :value;", params
        )

    select = f"SELECT {render_columns(columns)} FROM {target} WHERE {where}"

    if query_type is QueryType.SELECT_WHERE_BETWEEN:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) != 2:
            raise _invalid("BETWEEN needs a (low, high) pair as its value")
        low, high = value
        return Statement(
            f"{select} BETWEEN :value_low AND :value_high;",
            {"value_low": low, "value_high": high},
        )

    return Statement(
        f"{select} {_WHERE_OPERATORS[query_type]} :value;", {"value": _where_value(value)}
    )


def build_procedure_call(dialect: str, procedure: str, params: Mapping[str, Any] | None = None) -> Statement:
    """Stored-procedure invocation in the syntax of the connected dialect."""
    name = check_identifier(procedure, "procedure name")
    params = dict(params or {})
    for key in params:
        if not PARAM_NAME.match(key):
            raise _invalid(f"invalid parameter name: {key!r}")

    if dialect == "mssql":
        args = ", ".join(f"@{key} = :{key}" for key in params)
        return Statement(f"EXEC {name} {args}".rstrip(), params)
    args = ", ".join(f":{key}" for key in params)
    if dialect in ("mysql", "mariadb"):
        return Statement(f"CALL {name}({args})", params)
    if dialect == "postgresql":
        return Statement(f"SELECT * FROM {name}({args})", params)
    raise DataAccessError(
        f"stored procedures are not supported by the {dialect} dialect", kind=ErrorKind.UNSUPPORTED
    )
