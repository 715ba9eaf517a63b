from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.accounting_settings import AccountingSettings
from core.settings.modules.database_settings import DatabaseSettings
from core.settings.modules.outbox_settings import OutboxSettings
from core.settings.modules.sms_settings import SmsSettings
from core.settings.modules.storefront_settings import StorefrontSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    database: DatabaseSettings
    outbox: OutboxSettings
    sms: SmsSettings
    accounting: AccountingSettings
    storefront: StorefrontSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        database=DatabaseSettings(),
        outbox=OutboxSettings(),
        sms=SmsSettings(),
        accounting=AccountingSettings(),
        storefront=StorefrontSettings(),
    )
