"""
Notification trigger resolution.

Pure function: (fulfillment before/after, payment before/after) -> event.
Payment moves are checked first so that a payment which also auto-confirms
the order reports PLACED_TO_CONFIRMED once.
"""
from typing import Optional

from .enums import FulfillmentStatus, OrderSource, PaymentStatus, TriggerEvent

_PAYMENT_EVENTS = {
    (PaymentStatus.PENDING, PaymentStatus.PAID): TriggerEvent.PLACED_TO_CONFIRMED,
    (PaymentStatus.PAID, PaymentStatus.FAILED): TriggerEvent.PAYMENT_FAILED,
}

_FULFILLMENT_EVENTS = {
    (FulfillmentStatus.CONFIRMED, FulfillmentStatus.PROCESSING): TriggerEvent.CONFIRMED_TO_PROCESSING,
    (FulfillmentStatus.PROCESSING, FulfillmentStatus.SHIPPING): TriggerEvent.PROCESSING_TO_SHIPPING,
    (FulfillmentStatus.SHIPPING, FulfillmentStatus.DELIVERED): TriggerEvent.SHIPPING_TO_DELIVERED,
}


def resolve_trigger_event(
    old_fulfillment: FulfillmentStatus,
    new_fulfillment: FulfillmentStatus,
    old_payment: PaymentStatus,
    new_payment: PaymentStatus,
) -> Optional[TriggerEvent]:
    """Map a status change to at most one notification event."""
    if old_payment != new_payment:
        event = _PAYMENT_EVENTS.get((old_payment, new_payment))
        if event is not None:
            return event

    if old_fulfillment != new_fulfillment:
        event = _FULFILLMENT_EVENTS.get((old_fulfillment, new_fulfillment))
        if event is not None:
            return event
        if new_fulfillment == FulfillmentStatus.CANCELED:
            return TriggerEvent.ORDER_CANCELED

    return None


def creation_event(order_source: OrderSource, payment_status: PaymentStatus) -> TriggerEvent:
    """Event raised explicitly when an order is created.

    Only a counter sale paid on the spot gets a receipt; every other new
    order, counter pay-later included, announces ORDER_PLACED.
    """
    if order_source == OrderSource.COUNTER and payment_status == PaymentStatus.PAID:
        return TriggerEvent.COUNTER_PAYMENT_RECEIPT
    return TriggerEvent.ORDER_PLACED
