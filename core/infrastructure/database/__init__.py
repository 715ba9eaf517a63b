"""Database engine, session factory and lifecycle."""

from core.settings.modules.database_settings import DatabaseSettings

from .config import create_engine
from .lifecycle import build_session_factory, close_database, get_session_factory, init_database

__all__ = [
    "DatabaseSettings",
    "build_session_factory",
    "close_database",
    "create_engine",
    "get_session_factory",
    "init_database",
]
