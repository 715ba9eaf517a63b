"""SQLAlchemy repository implementations."""

from .accounting_repository_impl import SqlAlchemyAffiliateRepository, SqlAlchemyLedgerRepository
from .catalog_repository_impl import SqlAlchemyCatalogRepository
from .discount_repository_impl import SqlAlchemyDiscountRepository
from .notification_repository_impl import SqlAlchemyOutboxRepository, SqlAlchemyTemplateRepository
from .order_repository_impl import SqlAlchemyOrderRepository

__all__ = [
    "SqlAlchemyAffiliateRepository",
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyDiscountRepository",
    "SqlAlchemyLedgerRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyOutboxRepository",
    "SqlAlchemyTemplateRepository",
]
