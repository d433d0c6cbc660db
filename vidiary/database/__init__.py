"""
Database package.
Provides the async SQLAlchemy engine, session management, and ORM models.
"""
from vidiary.database.base import Base
from vidiary.database.session import create_engine, create_session_factory, session_scope

__all__ = [
    "Base",
    "create_engine",
    "create_session_factory",
    "session_scope",
]
