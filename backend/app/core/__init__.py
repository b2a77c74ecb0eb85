"""
Core module - Exceptions, logging and other core utilities.
"""
from app.core.exceptions import (
    UsersAPIError,
    ValidationError,
    ConflictError,
    UnauthorizedError,
    NotFoundError,
    StoreError,
)
from app.core.logging import setup_logging

__all__ = [
    "UsersAPIError",
    "ValidationError",
    "ConflictError",
    "UnauthorizedError",
    "NotFoundError",
    "StoreError",
    "setup_logging",
]
