"""
Database handle dependency.
"""
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.exceptions import StoreError


def get_db(request: Request) -> AsyncIOMotorDatabase:
    """Return the database handle opened during application startup."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise StoreError("Database not initialized")
    return db
