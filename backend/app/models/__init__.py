"""
Pydantic models for database documents.
"""
from app.models.user import User

__all__ = ["User"]
