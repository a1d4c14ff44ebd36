"""Engine and session helpers."""

from .engine import create_sync_engine, create_tables, get_sqlalchemy_url
from .session import get_sessionmaker, session_scope

__all__ = [
    "create_sync_engine",
    "create_tables",
    "get_sessionmaker",
    "get_sqlalchemy_url",
    "session_scope",
]
