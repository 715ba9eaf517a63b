"""
Order status enums.

Fulfillment and payment statuses evolve independently; see
core.domain.state_machine for the legal moves.
"""
from enum import Enum


class FulfillmentStatus(str, Enum):
    """Physical progress of an order."""

    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPING = "SHIPPING"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"


class PaymentStatus(str, Enum):
    """Payment state of an order."""

    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class PaymentMethod(str, Enum):
    """Supported payment channels."""

    CASH = "CASH"
    MBOB = "MBOB"
    BDB_EPAY = "BDB_EPAY"
    TPAY = "TPAY"
    BNB_MPAY = "BNB_MPAY"
    ZPSS = "ZPSS"


class OrderSource(str, Enum):
    """Where the order was taken. Used as the template filter."""

    ONLINE = "ONLINE"
    COUNTER = "COUNTER"


class FulfillmentType(str, Enum):
    """How the goods reach the customer."""

    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"
    INSTORE = "INSTORE"
