"""
Database access layer (async SQLAlchemy engine and session factories).
"""

from marketplace.database.async_db import (
    AsyncSessionLocal,
    async_engine,
    get_async_db,
)

__all__ = [
    "AsyncSessionLocal",
    "async_engine",
    "get_async_db",
]
