from __future__ import annotations

from pydantic import Field

from core.settings.base_settings import OrderflowBaseSettings


class DatabaseSettings(OrderflowBaseSettings):
    """
    Database configuration settings.

    Loaded from environment variables or .env file.
    Production uses ``postgresql+asyncpg://``; SQLite is for development.
    """

    database_url: str = Field("sqlite+aiosqlite:///./orders.db", alias="DB_DATABASE_URL")

    # Connection pool settings (ignored for SQLite)
    pool_size: int = Field(10, alias="DB_POOL_SIZE")
    max_overflow: int = Field(20, alias="DB_MAX_OVERFLOW")
    pool_recycle: int = Field(3600, alias="DB_POOL_RECYCLE")  # 1 hour

    # Echo SQL (for debugging)
    echo_sql: bool = Field(False, alias="DB_ECHO_SQL")

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
