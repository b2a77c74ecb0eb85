"""
User service for CRUD operations on the users collection.
"""
import logging
import math
import re
from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.database.databases import users_db
from app.models.user import User
from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    UserDeleteResponse,
)

logger = logging.getLogger(__name__)

# MongoDB skip values are signed 64-bit integers.
MAX_SKIP = 2**63 - 1
MAX_LIMIT = 100
MAX_PAGE = MAX_SKIP // MAX_LIMIT + 1


def is_present(value: Any) -> bool:
    """A required text field is present when it is a non-blank string."""
    return isinstance(value, str) and value.strip() != ""


def parse_object_id(user_id: str) -> ObjectId:
    """
    Convert a path id to an ObjectId.

    Malformed ids are reported exactly like missing documents.
    """
    if not isinstance(user_id, str) or not ObjectId.is_valid(user_id):
        raise NotFoundError(resource_id=user_id)
    return ObjectId(user_id)


def name_filter(name: Optional[str]) -> dict[str, Any]:
    """
    Partial, case-insensitive name match with the input taken literally.

    Only a missing or empty name disables filtering; whitespace is matched.
    """
    if not name:
        return {}
    return {"name": {"$regex": re.escape(name), "$options": "i"}}


class UserService:
    """Service for user CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with the users database."""
        self.db = db
        self.users = db[users_db.Collections.USERS]

    # ==================== Create ====================

    async def create_user(self, request: UserCreate) -> UserResponse:
        """
        Create a new user.

        Raises:
            ValidationError: If name or email is missing
            ConflictError: If the email is already registered
            StoreError: On any other database failure
        """
        if not is_present(request.name) or not is_present(request.email):
            raise ValidationError("Name and email are required")

        user = User(name=request.name, email=request.email, age=request.age)
        user_doc = user.to_mongo()

        try:
            result = await self.users.insert_one(user_doc)
        except DuplicateKeyError:
            raise ConflictError(context={"email": request.email})
        except PyMongoError as e:
            logger.exception("Failed to insert user")
            raise StoreError("Error creating user") from e

        user_doc["_id"] = result.inserted_id
        logger.info("Created user %s", result.inserted_id)
        return self._to_response(user_doc)

    # ==================== Read ====================

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        name: Optional[str] = None,
    ) -> UserListResponse:
        """
        List users with offset/limit pagination and an optional name filter.

        ``total`` counts every matching user, not just the returned page.
        """
        query = name_filter(name)
        skip = (page - 1) * limit
        if skip > MAX_SKIP:
            raise ValidationError("page is out of range", field="page")

        try:
            cursor = self.users.find(query).sort("_id", 1).skip(skip).limit(limit)
            docs = await cursor.to_list(length=limit)
            total = await self.users.count_documents(query)
        except PyMongoError as e:
            logger.exception("Failed to list users")
            raise StoreError("Error listing users") from e

        return UserListResponse(
            page=page,
            pages=math.ceil(total / limit),
            total=total,
            users=[self._to_response(doc) for doc in docs],
        )

    async def get_user(self, user_id: str) -> UserResponse:
        """Get a user by ID."""
        oid = parse_object_id(user_id)

        try:
            doc = await self.users.find_one({"_id": oid})
        except PyMongoError as e:
            logger.exception("Failed to fetch user %s", user_id)
            raise StoreError("Error fetching user") from e

        if not doc:
            raise NotFoundError(resource_id=user_id)

        return self._to_response(doc)

    # ==================== Update ====================

    async def update_user(self, user_id: str, request: UserUpdate) -> UserResponse:
        """
        Update the supplied fields of a user.

        Fields not sent in the request are left alone; ``age`` sent as null
        is cleared. ``_id`` and ``createdAt`` are never written.

        Raises:
            NotFoundError: If no user exists for the id
            ValidationError: If name or email is sent blank
            ConflictError: If the new email belongs to another user
            StoreError: On any other database failure
        """
        oid = parse_object_id(user_id)
        changes = request.model_dump(exclude_unset=True)

        for field in ("name", "email"):
            if field in changes and not is_present(changes[field]):
                raise ValidationError(f"{field.capitalize()} cannot be empty", field=field)

        set_fields = {k: v for k, v in changes.items() if v is not None}
        unset_fields = {k: "" for k, v in changes.items() if v is None}

        if not set_fields and not unset_fields:
            return await self.get_user(user_id)

        update: dict[str, Any] = {}
        if set_fields:
            update["$set"] = set_fields
        if unset_fields:
            update["$unset"] = unset_fields

        try:
            doc = await self.users.find_one_and_update(
                {"_id": oid},
                update,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ConflictError(context={"email": changes.get("email")})
        except PyMongoError as e:
            logger.exception("Failed to update user %s", user_id)
            raise StoreError("Error updating user") from e

        if not doc:
            raise NotFoundError(resource_id=user_id)

        logger.info("Updated user %s fields=%s", user_id, sorted(changes))
        return self._to_response(doc)

    # ==================== Delete ====================

    async def delete_user(self, user_id: str) -> UserDeleteResponse:
        """Delete a user and return the removed record."""
        oid = parse_object_id(user_id)

        try:
            doc = await self.users.find_one_and_delete({"_id": oid})
        except PyMongoError as e:
            logger.exception("Failed to delete user %s", user_id)
            raise StoreError("Error deleting user") from e

        if not doc:
            raise NotFoundError(resource_id=user_id)

        logger.info("Deleted user %s", user_id)
        return UserDeleteResponse(message="User removed", removed=self._to_response(doc))

    # ==================== Helpers ====================

    def _to_response(self, doc: dict) -> UserResponse:
        """Convert a MongoDB document to a UserResponse."""
        return UserResponse.from_model(User.from_mongo(doc))
