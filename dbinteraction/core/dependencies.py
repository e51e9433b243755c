"""
FastAPI dependencies - injection for data access (SOLID: Dependency Inversion).
Challenge: One connection factory per process; per-request data-access objects.
"""

from typing import Annotated

from fastapi import Depends

from dbinteraction.config import get_settings
from dbinteraction.db.data_access import SqlDataAccess, UserData
from dbinteraction.db.session import ConnectionFactory

# Shared engines (connection pools managed by SQLAlchemy), disposed on shutdown
connections = ConnectionFactory(echo=get_settings().debug)


def get_sql_data_access() -> SqlDataAccess:
    """SqlDataAccess over the configured connection strings."""
    return SqlDataAccess(get_settings(), connections)


SqlAccess = Annotated[SqlDataAccess, Depends(get_sql_data_access)]


def get_user_data(sql: SqlAccess) -> UserData:
    return UserData(sql)


UserAccess = Annotated[UserData, Depends(get_user_data)]
