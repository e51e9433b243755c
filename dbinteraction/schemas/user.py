"""User row/request schemas - mapped under the database's PascalCase column names."""

from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_pascal

_USER_CONFIG = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)


class UserDB(BaseModel):
    """One row of the Users table. Field order is the selected column order."""

    model_config = _USER_CONFIG

    id: int | None = None  # Assigned by the database on insert
    first_name: str
    last_name: str
    email_address: str

    def __str__(self) -> str:
        return f"{self.id} :: {self.email_address}"


class UserCreate(BaseModel):
    model_config = _USER_CONFIG

    first_name: str
    last_name: str
    email_address: EmailStr
