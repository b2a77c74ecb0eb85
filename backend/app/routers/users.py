"""
Users router for the User CRUD endpoints.

Every route here sits behind the static bearer token gate.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.dependencies.auth import require_token
from app.dependencies.database import get_db
from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    UserDeleteResponse,
)
from app.services.user_service import MAX_LIMIT, MAX_PAGE, UserService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_token)],
)


def get_user_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_db)],
) -> UserService:
    """Dependency to get UserService instance."""
    return UserService(db)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    body: UserCreate,
    user_service: UserService = Depends(get_user_service),
):
    """
    Create a new user.

    - **name**: Display name (required)
    - **email**: Unique email address (required)
    - **age**: Optional age, 1-120
    """
    return await user_service.create_user(body)


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
)
async def list_users(
    page: int = Query(1, ge=1, le=MAX_PAGE, description="Page number"),
    limit: int = Query(10, ge=1, le=MAX_LIMIT, description="Items per page"),
    name: Optional[str] = Query(None, description="Partial, case-insensitive name filter"),
    user_service: UserService = Depends(get_user_service),
):
    """
    Get a paginated list of users.

    - **page**: Page number (default: 1)
    - **limit**: Items per page (default: 10, max: 100)
    - **name**: Optional name filter
    """
    return await user_service.list_users(page=page, limit=limit, name=name)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user",
)
async def get_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
):
    """Get a single user by ID."""
    return await user_service.get_user(user_id)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
)
async def update_user(
    user_id: str,
    body: UserUpdate,
    user_service: UserService = Depends(get_user_service),
):
    """
    Update a user's name, email or age.

    Only the fields present in the body are changed.
    """
    return await user_service.update_user(user_id, body)


@router.delete(
    "/{user_id}",
    response_model=UserDeleteResponse,
    summary="Delete user",
)
async def delete_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
):
    """
    Delete a user and return the removed record.

    **Warning**: This action cannot be undone.
    """
    return await user_service.delete_user(user_id)
