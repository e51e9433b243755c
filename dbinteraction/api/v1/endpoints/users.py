"""
User endpoints - pass-through controller over UserData (RESTful API).
Design: Thin controller; every route returns the response envelope unchanged (HTTP 200).
Callers inspect error / error_code rather than the status code.
"""

from fastapi import APIRouter, Query

from dbinteraction.core.dependencies import UserAccess
from dbinteraction.schemas.common import GenericResponse, ResponseEnvelope
from dbinteraction.schemas.user import UserCreate, UserDB

router = APIRouter()


@router.get("/by-email", response_model=ResponseEnvelope[UserDB])
async def get_by_email(users: UserAccess, email: str = Query(..., min_length=1)):
    """Users with the given email address."""
    return await users.get_user_by_email(email)


@router.get("/{user_id}", response_model=ResponseEnvelope[UserDB])
async def get_by_id(users: UserAccess, user_id: int):
    return await users.get_user_by_id(user_id)


@router.get("/{user_id}/procedure", response_model=ResponseEnvelope[UserDB])
async def get_by_id_with_stored_procedure(users: UserAccess, user_id: int):
    """Lookup via spGetUserById. Fails with error_code "unsupported" on sqlite."""
    return await users.get_user_by_id_with_stored_procedure(user_id)


@router.post("", response_model=ResponseEnvelope[GenericResponse])
async def insert_user(users: UserAccess, data: UserCreate):
    """Insert via spSaveUser; data[0].id is the new user's id."""
    return await users.insert_user(data)


@router.delete("/{user_id}", response_model=ResponseEnvelope[GenericResponse])
async def delete_user(users: UserAccess, user_id: int):
    return await users.delete_user(user_id)
