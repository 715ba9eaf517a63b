"""Domain layer - pure domain models and interfaces."""

from .entities import Discount, NotificationTemplate, Order, OrderItem, OutboxEntry
from .exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    TransientExternalError,
    ValidationError,
)
from .value_objects import ExecutionID, Money, OrderNumber, ReceiptNumber

__all__ = [
    "ConflictError",
    "Discount",
    "DomainError",
    "ExecutionID",
    "Money",
    "NotFoundError",
    "NotificationTemplate",
    "Order",
    "OrderItem",
    "OrderNumber",
    "OutboxEntry",
    "ReceiptNumber",
    "TransientExternalError",
    "ValidationError",
]
