"""Domain entities."""

from .accounting import Affiliate, AffiliateCommission, LedgerEntry
from .catalog import Customer, Product
from .discount import Discount, normalize_voucher
from .notification import MAX_SEND_COUNT, NotificationTemplate, OutboxEntry
from .order import CustomerSnapshot, Order, OrderDiscount, OrderItem

__all__ = [
    "Affiliate",
    "AffiliateCommission",
    "Customer",
    "CustomerSnapshot",
    "Discount",
    "LedgerEntry",
    "MAX_SEND_COUNT",
    "NotificationTemplate",
    "Order",
    "OrderDiscount",
    "OrderItem",
    "OutboxEntry",
    "Product",
    "normalize_voucher",
]
