# Data access layer: generic SQL execution plus per-entity bindings

from dbinteraction.db.data_access.entity_data_access import EntityDataAccess
from dbinteraction.db.data_access.sql_data_access import SqlDataAccess
from dbinteraction.db.data_access.user_data import UserData

__all__ = ["SqlDataAccess", "EntityDataAccess", "UserData"]
