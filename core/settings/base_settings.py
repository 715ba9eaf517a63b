"""Common base for every settings section."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrderflowBaseSettings(BaseSettings):
    """Reads ``.env`` from the working directory; unknown keys are ignored."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
