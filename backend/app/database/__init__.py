"""
Database module - MongoDB connection and collection definitions.

The client accessors in ``app.database.connections`` belong to the
application lifespan; handlers get the database through ``get_db``.
"""
from app.database.databases import users_db

__all__ = [
    "users_db",
]
