from __future__ import annotations

from typing import Optional

from pydantic import Field

from core.settings.base_settings import OrderflowBaseSettings


class SmsSettings(OrderflowBaseSettings):
    """
    SMS gateway settings.
    Loaded from .env file with exact variable name matching.
    """

    url: Optional[str] = Field(None, alias="SMS_URL")
    key: Optional[str] = Field(None, alias="SMS_KEY")
    sender_name: str = Field("IDesign", alias="SMS_SENDER_NAME")
    timeout_seconds: float = Field(10.0, gt=0, alias="SMS_TIMEOUT_SECONDS")
    max_message_length: int = Field(459, ge=1, alias="SMS_MAX_MESSAGE_LENGTH")
    fallback_enabled: bool = Field(True, alias="SMS_FALLBACK_ENABLED")

    @property
    def configured(self) -> bool:
        return bool(self.url and self.key)
