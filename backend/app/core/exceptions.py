"""
Application exception hierarchy.

Services and dependencies raise these; the handlers registered in
``app.main`` turn them into ``{"error": message}`` JSON responses.

    UsersAPIError (base)
    ├── ValidationError     -> 400
    ├── ConflictError       -> 400
    ├── UnauthorizedError   -> 401
    ├── NotFoundError       -> 404
    └── StoreError          -> 500
"""
from typing import Any, Optional

from fastapi import status


class UsersAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Client-facing error description
        context: Extra debug info, logged but never returned to the client
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(UsersAPIError):
    """Client input is missing or invalid."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(UsersAPIError):
    """A unique field collides with an existing document."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = "Email already registered",
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(UsersAPIError):
    """Missing or wrong bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message=message)


class NotFoundError(UsersAPIError):
    """No document exists for the requested id (or the id is malformed)."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(
        self,
        message: str = "User not found",
        resource_id: Optional[str] = None,
    ):
        ctx = {"resource_id": resource_id} if resource_id else {}
        super().__init__(message=message, context=ctx)


class StoreError(UsersAPIError):
    """Any database failure other than a uniqueness conflict."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
