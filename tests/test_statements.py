"""
Statement builder tests - exact templates per query type, bound values, rejected fragments.
"""

import pytest

from dbinteraction.core.errors import DataAccessError, ErrorKind
from dbinteraction.db.enums import TABLE_NAMES, DatabaseTables, QueryType
from dbinteraction.db.statements import RawSql, build_procedure_call, build_statement


def test_select_where_template():
    """SelectWhere on Users renders the classic template; the value is bound, not inlined."""
    stmt = build_statement(QueryType.SELECT_WHERE, "Users", "Id,EmailAddress", "Id", "1")
    assert stmt.text == "SELECT Id,EmailAddress FROM Users WHERE Id = :value;"
    assert stmt.params == {"value": "1"}
    assert stmt.preview() == "SELECT Id,EmailAddress FROM Users WHERE Id = 1;"


@pytest.mark.parametrize(
    "query_type, kwargs, preview",
    [
        (QueryType.SELECT, {"columns": "Id, FirstName"}, "SELECT Id, FirstName FROM Users;"),
        (
            QueryType.DELETE,
            {"condition": "Id", "value": 7},
            "DELETE FROM Users WHERE Id = 7;",
        ),
        (
            QueryType.INSERT,
            {"columns": "FirstName,LastName", "values": ["Ada", "Lovelace"]},
            "INSERT INTO Users(FirstName,LastName) VALUES (Ada, Lovelace);",
        ),
        (
            QueryType.UPDATE,
            {"condition": "Id", "value": 3, "values": {"FirstName": "Grace"}},
            "UPDATE Users SET FirstName = Grace WHERE Id = 3;",
        ),
        (
            QueryType.SELECT_WHERE_LIKE,
            {"columns": "Id", "condition": "EmailAddress", "value": "%@test.com"},
            "SELECT Id FROM Users WHERE EmailAddress LIKE %@test.com;",
        ),
        (
            QueryType.SELECT_WHERE_BETWEEN,
            {"columns": "Id", "condition": "Id", "value": (2, 5)},
            "SELECT Id FROM Users WHERE Id BETWEEN 2 AND 5;",
        ),
    ],
)
def test_templates_by_query_type(query_type, kwargs, preview):
    stmt = build_statement(query_type, DatabaseTables.USERS, **kwargs)
    assert stmt.preview() == preview


def test_values_never_appear_in_sql_text():
    hostile = "1; DROP TABLE Users; --"
    stmt = build_statement(QueryType.SELECT_WHERE, DatabaseTables.USERS, "Id", "Id", hostile)
    assert hostile not in stmt.text
    assert stmt.params == {"value": hostile}


def test_insert_from_mapping_derives_columns():
    stmt = build_statement(
        QueryType.INSERT, DatabaseTables.USERS, values={"FirstName": "Ada", "EmailAddress": "a@b.c"}
    )
    assert stmt.text == "INSERT INTO Users(FirstName, EmailAddress) VALUES (:v0, :v1);"
    assert stmt.params == {"v0": "Ada", "v1": "a@b.c"}


def test_update_binds_set_values_and_condition_separately():
    stmt = build_statement(
        QueryType.UPDATE,
        DatabaseTables.USERS,
        condition="Id",
        value=1,
        values={"FirstName": "A", "LastName": "B"},
    )
    assert stmt.text == "UPDATE Users SET FirstName = :set_0, LastName = :set_1 WHERE Id = :value;"
    assert stmt.params == {"set_0": "A", "set_1": "B", "value": 1}


def test_pseudonym_appends_lowercase_alias():
    stmt = build_statement(QueryType.SELECT, "Users", "u.Id", uses_pseudonym=True)
    assert stmt.text == "SELECT u.Id FROM Users AS u;"


def test_logical_table_resolves_through_mapping():
    assert TABLE_NAMES[DatabaseTables.USERS] == "Users"
    with pytest.raises(TypeError):
        TABLE_NAMES[DatabaseTables.USERS] = "Other"  # read-only


def test_raw_table_text_is_used_verbatim():
    join = RawSql("Users u JOIN Orders o ON o.UserId = u.Id")
    stmt = build_statement(QueryType.SELECT_WHERE, join, "u.Id, o.Id", "u.Id", 1)
    assert stmt.text == "SELECT u.Id, o.Id FROM Users u JOIN Orders o ON o.UserId = u.Id WHERE u.Id = :value;"


def test_transaction_uses_table_text_as_statement():
    stmt = build_statement(
        QueryType.TRANSACTION, RawSql("SELECT COUNT(*) FROM Users WHERE Id > :min_id"), values={"min_id": 3}
    )
    assert stmt.text == "SELECT COUNT(*) FROM Users WHERE Id > :min_id"
    assert stmt.preview() == "SELECT COUNT(*) FROM Users WHERE Id > 3"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"table": "Users; DROP TABLE Users", "columns": "Id"},
        {"table": "Users", "columns": "Id, (SELECT password FROM secrets)"},
        {"table": "Users", "columns": ""},
        {"table": None, "columns": "Id"},
    ],
)
def test_invalid_structural_fragments_rejected(kwargs):
    with pytest.raises(DataAccessError) as exc_info:
        build_statement(QueryType.SELECT, **kwargs)
    assert exc_info.value.kind is ErrorKind.INVALID_QUERY


@pytest.mark.parametrize(
    "query_type, kwargs",
    [
        (QueryType.SELECT_WHERE, {"columns": "Id", "condition": "Id = 1 OR 1", "value": 1}),
        (QueryType.SELECT_WHERE, {"columns": "Id", "condition": "Id", "value": None}),
        (QueryType.SELECT_WHERE_BETWEEN, {"columns": "Id", "condition": "Id", "value": "1 AND 5"}),
        (QueryType.INSERT, {"columns": "FirstName,LastName", "values": ["only one"]}),
        (QueryType.INSERT, {"columns": "FirstName", "values": "'Ada'"}),
        (QueryType.INSERT, {"columns": "FirstName", "values": (v for v in ["Ada"])}),
        (QueryType.INSERT, {"columns": "FirstName"}),
        (QueryType.UPDATE, {"condition": "Id", "value": 1, "values": "FirstName = 'x'"}),
    ],
)
def test_malformed_arguments_rejected(query_type, kwargs):
    with pytest.raises(DataAccessError) as exc_info:
        build_statement(query_type, DatabaseTables.USERS, **kwargs)
    assert exc_info.value.kind is ErrorKind.INVALID_QUERY


@pytest.mark.parametrize(
    "dialect, expected",
    [
        ("mssql", "EXEC spGetUserById @Id = :Id"),
        ("mysql", "CALL spGetUserById(:Id)"),
        ("mariadb", "CALL spGetUserById(:Id)"),
        ("postgresql", "SELECT * FROM spGetUserById(:Id)"),
    ],
)
def test_procedure_call_per_dialect(dialect, expected):
    stmt = build_procedure_call(dialect, "spGetUserById", {"Id": 4})
    assert stmt.text == expected
    assert stmt.params == {"Id": 4}


def test_procedure_call_without_parameters():
    assert build_procedure_call("mssql", "spDeleteUser").text == "EXEC spDeleteUser"
    assert build_procedure_call("mysql", "spDeleteUser").text == "CALL spDeleteUser()"


def test_procedure_call_unsupported_on_sqlite():
    with pytest.raises(DataAccessError) as exc_info:
        build_procedure_call("sqlite", "spGetUserById", {"Id": 1})
    assert exc_info.value.kind is ErrorKind.UNSUPPORTED


def test_procedure_name_must_be_identifier():
    with pytest.raises(DataAccessError) as exc_info:
        build_procedure_call("mssql", "sp; DROP TABLE Users")
    assert exc_info.value.kind is ErrorKind.INVALID_QUERY


@pytest.mark.parametrize("table", [None, "", DatabaseTables.USERS])
def test_transaction_requires_statement_text(table):
    with pytest.raises(DataAccessError) as exc_info:
        build_statement(QueryType.TRANSACTION, table)
    assert exc_info.value.kind is ErrorKind.INVALID_QUERY
