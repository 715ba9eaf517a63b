"""Repository interfaces."""

from .accounting_repository import AffiliateRepository, LedgerRepository
from .catalog_repository import CatalogRepository
from .discount_repository import DiscountRepository
from .notification_repository import OutboxRepository, TemplateRepository
from .order_repository import OrderRepository

__all__ = [
    "AffiliateRepository",
    "CatalogRepository",
    "DiscountRepository",
    "LedgerRepository",
    "OrderRepository",
    "OutboxRepository",
    "TemplateRepository",
]
