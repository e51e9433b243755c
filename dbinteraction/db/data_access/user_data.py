"""
User data access - binds the Users table and its stored procedures (SOLID: Single Responsibility).
"""

from dbinteraction.db.data_access.entity_data_access import EntityDataAccess
from dbinteraction.db.enums import DatabaseTables
from dbinteraction.schemas.common import GenericResponse, ResponseEnvelope
from dbinteraction.schemas.user import UserCreate, UserDB


class UserData(EntityDataAccess[UserDB]):
    """User-specific operations. Pure delegation to the generic entity template."""

    model = UserDB
    table = DatabaseTables.USERS
    get_by_id_procedure = "spGetUserById"
    save_procedure = "spSaveUser"
    delete_procedure = "spDeleteUser"

    async def get_user_by_id(self, id: int) -> ResponseEnvelope[UserDB]:
        return await self.get_by_id(id)

    async def get_user_by_id_with_stored_procedure(self, id: int) -> ResponseEnvelope[UserDB]:
        return await self.get_by_id_with_stored_procedure(id)

    async def get_user_by_email(self, email: str) -> ResponseEnvelope[UserDB]:
        """Find user by email address."""
        return await self.get_by_field("EmailAddress", email)

    async def insert_user(self, user: UserCreate | UserDB) -> ResponseEnvelope[GenericResponse]:
        return await self.insert(user)

    async def delete_user(self, id: int) -> ResponseEnvelope[GenericResponse]:
        return await self.delete(id)
