# Settings modules
from .accounting_settings import AccountingSettings
from .app_settings import AppSettings, get_app_settings
from .database_settings import DatabaseSettings
from .outbox_settings import OutboxSettings
from .sms_settings import SmsSettings
from .storefront_settings import StorefrontSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "AccountingSettings",
    "DatabaseSettings",
    "OutboxSettings",
    "SmsSettings",
    "StorefrontSettings",
]
