"""
Request and response schemas for API endpoints.
"""
from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    UserDeleteResponse,
)

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserListResponse",
    "UserDeleteResponse",
]
