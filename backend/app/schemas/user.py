"""
User request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import User


class UserCreate(BaseModel):
    """
    Create user request body.

    ``name`` and ``email`` are required, but their presence is checked by
    ``UserService.create_user``, not here.
    """
    name: Optional[str] = Field(None, description="Display name (required)")
    email: Optional[str] = Field(None, description="Unique email address (required)")
    age: Optional[int] = Field(None, ge=1, le=120, description="Age in years (1-120)")


class UserUpdate(BaseModel):
    """Update user request body. Only the fields sent are changed."""
    name: Optional[str] = Field(None, description="New display name")
    email: Optional[str] = Field(None, description="New email address")
    age: Optional[int] = Field(None, ge=1, le=120, description="New age, null to clear")


class UserResponse(BaseModel):
    """User as returned by the API."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    age: Optional[int] = Field(None, description="Age in years")
    created_at: datetime = Field(
        ..., alias="createdAt", description="Creation timestamp"
    )

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            age=user.age,
            created_at=user.created_at,
        )


class UserListResponse(BaseModel):
    """Paginated user list response."""
    page: int = Field(..., description="Current page")
    pages: int = Field(..., description="Total number of pages")
    total: int = Field(..., description="Total number of matching users")
    users: list[UserResponse] = Field(..., description="Users on this page")


class UserDeleteResponse(BaseModel):
    """Delete confirmation with the removed record."""
    message: str = Field(default="User removed", description="Confirmation message")
    removed: UserResponse = Field(..., description="The deleted user")
