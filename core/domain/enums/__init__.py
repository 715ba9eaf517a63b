"""Domain enums."""

from .discount_types import DiscountScope, DiscountType, DiscountValueType
from .ledger import LedgerEntryKind
from .notification import OutboxEventType, OutboxStatus, TriggerEvent
from .order_status import (
    FulfillmentStatus,
    FulfillmentType,
    OrderSource,
    PaymentMethod,
    PaymentStatus,
)

__all__ = [
    "DiscountScope",
    "DiscountType",
    "DiscountValueType",
    "FulfillmentStatus",
    "FulfillmentType",
    "LedgerEntryKind",
    "OrderSource",
    "OutboxEventType",
    "OutboxStatus",
    "PaymentMethod",
    "PaymentStatus",
    "TriggerEvent",
]
