"""Database utilities - engine and session."""

from src.taskhub.core.db.engine import create_tables, dispose_engine, get_engine
from src.taskhub.core.db.session import get_session

__all__ = [
    # Engine
    "create_tables",
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
]
