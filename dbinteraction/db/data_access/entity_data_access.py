"""
Entity data access - generic per-entity binding of SqlDataAccess (SOLID: Interface Segregation).
Challenge: One template for every entity instead of hand-duplicated delegation code.
Design: Subclasses declare model, table, procedure names; no logic beyond parameter marshaling.
"""

from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from dbinteraction.config import DEFAULT_CONNECTION
from dbinteraction.db.data_access.sql_data_access import SqlDataAccess
from dbinteraction.db.enums import DatabaseTables, QueryType
from dbinteraction.schemas.common import GenericResponse, ResponseEnvelope

ModelType = TypeVar("ModelType", bound=BaseModel)


class EntityDataAccess(Generic[ModelType]):
    """Generic async entity access. Subclasses fill in the class attributes."""

    model: ClassVar[type[BaseModel]]
    table: ClassVar[DatabaseTables]
    id_column: ClassVar[str] = "Id"
    get_by_id_procedure: ClassVar[str]
    save_procedure: ClassVar[str]
    delete_procedure: ClassVar[str]
    connection_name: ClassVar[str] = DEFAULT_CONNECTION

    def __init__(self, sql_data_access: SqlDataAccess):
        self.sql = sql_data_access

    @classmethod
    def columns(cls) -> str:
        """Selected column list, in model field order, under the database names."""
        return ", ".join(field.alias or name for name, field in cls.model.model_fields.items())

    async def get_by_field(self, column: str, value: Any) -> ResponseEnvelope[ModelType]:
        """Rows whose column equals value, through the generic statement path."""
        return await self.sql.generic_query(
            self.connection_name,
            QueryType.SELECT_WHERE,
            self.table,
            self.columns(),
            column,
            value,
            row_type=self.model,
        )

    async def get_by_id(self, id: int) -> ResponseEnvelope[ModelType]:
        return await self.get_by_field(self.id_column, id)

    async def get_by_id_with_stored_procedure(self, id: int) -> ResponseEnvelope[ModelType]:
        """Same lookup through the entity's stored procedure (engines with procedures only)."""
        return await self.sql.load_data(
            self.connection_name,
            self.get_by_id_procedure,
            {self.id_column: id},
            row_type=self.model,
        )

    async def insert(self, entity: BaseModel) -> ResponseEnvelope[GenericResponse]:
        """Save through the entity's procedure. The database assigns the id."""
        parameters = entity.model_dump(by_alias=True, exclude={"id"})
        return await self.sql.save_data(self.save_procedure, parameters, self.connection_name)

    async def delete(self, id: int) -> ResponseEnvelope[GenericResponse]:
        return await self.sql.delete_data(self.delete_procedure, self.connection_name, id)
