"""
Notification and outbox enums.
"""
from enum import Enum


class TriggerEvent(str, Enum):
    """Logical notification events raised by the order lifecycle."""

    ORDER_PLACED = "ORDER_PLACED"
    COUNTER_PAYMENT_RECEIPT = "COUNTER_PAYMENT_RECEIPT"
    PLACED_TO_CONFIRMED = "PLACED_TO_CONFIRMED"
    CONFIRMED_TO_PROCESSING = "CONFIRMED_TO_PROCESSING"
    PROCESSING_TO_SHIPPING = "PROCESSING_TO_SHIPPING"
    SHIPPING_TO_DELIVERED = "SHIPPING_TO_DELIVERED"
    ORDER_CANCELED = "ORDER_CANCELED"
    PAYMENT_FAILED = "PAYMENT_FAILED"


class OutboxStatus(str, Enum):
    """Outbox row lifecycle."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class OutboxEventType(str, Enum):
    """Kinds of deferred work. Only SEND_SMS has a handler."""

    SEND_SMS = "SEND_SMS"
    SEND_EMAIL = "SEND_EMAIL"
    WEBHOOK = "WEBHOOK"
