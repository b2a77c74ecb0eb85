"""
Dependencies for dependency injection in routes.
"""
from app.dependencies.auth import require_token
from app.dependencies.database import get_db

__all__ = [
    "require_token",
    "get_db",
]
