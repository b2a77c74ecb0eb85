"""
User document model for the users collection.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision BSON stores."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class User(BaseModel):
    """
    User document as stored in MongoDB.

    ``_id`` is assigned by the store on insert; ``createdAt`` is set once
    here and never written again.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Unique email address")
    age: Optional[int] = Field(None, ge=1, le=120, description="Age in years")
    created_at: datetime = Field(
        default_factory=utc_now,
        alias="createdAt",
        description="Creation timestamp",
    )

    @classmethod
    def from_mongo(cls, doc: dict[str, Any]) -> "User":
        """Build a model from a raw document, stringifying the ObjectId."""
        data = dict(doc)
        data["_id"] = str(data["_id"])
        created_at = data.get("createdAt")
        # Motor hands back naive datetimes unless the client is tz_aware
        if isinstance(created_at, datetime) and created_at.tzinfo is None:
            data["createdAt"] = created_at.replace(tzinfo=timezone.utc)
        return cls(**data)

    def to_mongo(self) -> dict[str, Any]:
        """Document body for insert; ``_id`` is left to the store."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)
