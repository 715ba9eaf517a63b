from __future__ import annotations

from typing import Optional

from pydantic import Field

from core.settings.base_settings import OrderflowBaseSettings


class StorefrontSettings(OrderflowBaseSettings):
    """
    Customer-facing values used in numbering and SMS rendering.
    Loaded from .env file with exact variable name matching.
    """

    frontend_url: str = Field("http://localhost:3000", alias="FRONTEND_URL")
    support_phone: Optional[str] = Field(None, alias="SUPPORT_PHONE")
    currency_symbol: str = Field("Nu.", alias="STORE_CURRENCY_SYMBOL")
    order_number_prefix: str = Field("ORD", alias="STORE_ORDER_NUMBER_PREFIX")
    receipt_number_prefix: str = Field("RCP", alias="STORE_RECEIPT_NUMBER_PREFIX")

    def tracking_link(self, order_number: str) -> str:
        return f"{self.frontend_url.rstrip('/')}/track/{order_number}"

    def feedback_link(self, token: str) -> str:
        return f"{self.frontend_url.rstrip('/')}/feedback/{token}"
