from __future__ import annotations

from pydantic import Field

from core.settings.base_settings import OrderflowBaseSettings


class OutboxSettings(OrderflowBaseSettings):
    """
    Outbox worker settings.
    Loaded from .env file with exact variable name matching.
    """

    poll_interval_seconds: float = Field(30.0, gt=0, alias="OUTBOX_POLL_INTERVAL_SECONDS")
    batch_size: int = Field(50, ge=1, alias="OUTBOX_BATCH_SIZE")
    max_retries: int = Field(3, ge=1, alias="OUTBOX_MAX_RETRIES")
    retry_base_delay_seconds: float = Field(60.0, ge=0, alias="OUTBOX_RETRY_BASE_DELAY_SECONDS")
    # PROCESSING rows older than this are assumed orphaned by a crashed worker.
    processing_timeout_seconds: float = Field(600.0, gt=0, alias="OUTBOX_PROCESSING_TIMEOUT_SECONDS")
