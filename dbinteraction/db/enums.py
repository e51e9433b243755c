"""
Statement shapes and logical table identifiers.
Design: Closed enums; the physical table names are a read-only mapping fixed at import.
"""

from enum import Enum
from types import MappingProxyType


class QueryType(str, Enum):
    """Supported SQL statement shapes. Selects the template in db.statements."""

    SELECT = "Select"
    INSERT = "Insert"
    UPDATE = "Update"
    DELETE = "Delete"
    TRANSACTION = "Transaction"
    SELECT_WHERE = "SelectWhere"
    SELECT_WHERE_LIKE = "SelectWhereLike"
    SELECT_WHERE_BETWEEN = "SelectWhereBetween"


class DatabaseTables(str, Enum):
    """Logical table identifiers known to the data-access layer."""

    USERS = "Users"


TABLE_NAMES = MappingProxyType(
    {
        DatabaseTables.USERS: "Users",
    }
)
