"""
Order state machine.

Fulfillment and payment transitions as pure functions over immutable
``Order`` snapshots. Each function validates the move, returns a
``Transition`` describing before/after and the notification event, and
never touches persistence. The application service decides which side
effects to run from the transition flags.

CRITICAL: This file must contain ZERO imports from sqlalchemy/pydantic/fastapi.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from .entities import Order
from .enums import FulfillmentStatus, PaymentMethod, PaymentStatus, TriggerEvent
from .exceptions import ConflictError, ValidationError
from .triggers import resolve_trigger_event

FULFILLMENT_TRANSITIONS: Dict[FulfillmentStatus, FrozenSet[FulfillmentStatus]] = {
    FulfillmentStatus.PLACED: frozenset({FulfillmentStatus.CONFIRMED, FulfillmentStatus.CANCELED}),
    FulfillmentStatus.CONFIRMED: frozenset({FulfillmentStatus.PROCESSING, FulfillmentStatus.CANCELED}),
    FulfillmentStatus.PROCESSING: frozenset({FulfillmentStatus.SHIPPING, FulfillmentStatus.CANCELED}),
    FulfillmentStatus.SHIPPING: frozenset({FulfillmentStatus.DELIVERED, FulfillmentStatus.CANCELED}),
    FulfillmentStatus.DELIVERED: frozenset(),
    FulfillmentStatus.CANCELED: frozenset(),
}

TERMINAL_STATES = frozenset(
    status for status, targets in FULFILLMENT_TRANSITIONS.items() if not targets
)

# First-time-only timestamp per fulfillment status
_TIMESTAMP_FIELDS: Dict[FulfillmentStatus, str] = {
    FulfillmentStatus.PLACED: "placed_at",
    FulfillmentStatus.CONFIRMED: "confirmed_at",
    FulfillmentStatus.PROCESSING: "processing_at",
    FulfillmentStatus.SHIPPING: "shipping_at",
    FulfillmentStatus.DELIVERED: "delivered_at",
    FulfillmentStatus.CANCELED: "canceled_at",
}


@dataclass(frozen=True)
class Transition:
    """Result of a state change: both snapshots plus derived flags."""
    before: Order
    after: Order

    @property
    def changed(self) -> bool:
        return self.before != self.after

    @property
    def event(self) -> Optional[TriggerEvent]:
        return resolve_trigger_event(
            self.before.fulfillment_status,
            self.after.fulfillment_status,
            self.before.payment_status,
            self.after.payment_status,
        )

    @property
    def payment_completed(self) -> bool:
        return (
            self.before.payment_status != PaymentStatus.PAID
            and self.after.payment_status == PaymentStatus.PAID
        )

    @property
    def delivered(self) -> bool:
        return (
            self.before.fulfillment_status != FulfillmentStatus.DELIVERED
            and self.after.fulfillment_status == FulfillmentStatus.DELIVERED
        )

    @property
    def canceled(self) -> bool:
        return not self.before.is_canceled and self.after.is_canceled

    @property
    def reversal_required(self) -> bool:
        return self.canceled and self.before.is_receipted


def can_transition(current: FulfillmentStatus, target: FulfillmentStatus) -> bool:
    """Whether ``current -> target`` is in the adjacency table."""
    return target in FULFILLMENT_TRANSITIONS[current]


def stamp(order: Order, status: FulfillmentStatus, now: datetime) -> Dict[str, datetime]:
    """Timestamp changes for entering ``status``. Existing values are kept."""
    field_name = _TIMESTAMP_FIELDS[status]
    if getattr(order, field_name) is None:
        return {field_name: now}
    return {}


def apply_fulfillment(
    order: Order,
    target: FulfillmentStatus,
    now: datetime,
    **details: Optional[str],
) -> Transition:
    """Move the order along the fulfillment adjacency table.

    ``details`` may carry driver_name, driver_phone, vehicle_number or
    feedback_token; ``None`` values are ignored. A same-status update is
    a no-op. Cancellation goes through ``apply_cancellation``.

    Raises:
        ValidationError: if the move is not in the adjacency table
    """
    if target == FulfillmentStatus.CANCELED:
        return apply_cancellation(order, now)

    if target == order.fulfillment_status:
        return Transition(before=order, after=order)

    if not can_transition(order.fulfillment_status, target):
        raise ValidationError(
            f"Invalid status transition from {order.fulfillment_status.value} "
            f"to {target.value}",
            {"from": order.fulfillment_status.value, "to": target.value},
        )

    changes = {key: value for key, value in details.items() if value is not None}
    changes.update(stamp(order, target, now))
    after = replace(order, fulfillment_status=target, updated_at=now, **changes)
    return Transition(before=order, after=after)


def apply_payment(
    order: Order,
    target: PaymentStatus,
    now: datetime,
    payment_method: Optional[PaymentMethod] = None,
) -> Transition:
    """Apply a payment status change other than failure.

    PENDING -> PAID sets ``paid_at`` and, while the order is still PLACED,
    auto-confirms it in the same step.

    Raises:
        ConflictError: if the order is already PAID
        ValidationError: for canceled orders, FAILED payments and backwards moves
    """
    current = order.payment_status

    if target == PaymentStatus.FAILED:
        raise ValidationError("Payment failure must go through order cancellation")

    if target == PaymentStatus.PENDING:
        if current == PaymentStatus.PENDING:
            return Transition(before=order, after=order)
        raise ValidationError(
            f"Invalid payment transition from {current.value} to {target.value}"
        )

    if current == PaymentStatus.PAID:
        raise ConflictError(f"Order {order.order_number} is already paid")
    if current == PaymentStatus.FAILED or order.is_canceled:
        raise ValidationError(
            f"Cannot accept payment for order {order.order_number}: "
            f"payment {current.value}, fulfillment {order.fulfillment_status.value}"
        )

    changes = {"payment_status": PaymentStatus.PAID, "updated_at": now}
    if order.paid_at is None:
        changes["paid_at"] = now
    if payment_method is not None:
        changes["payment_method"] = payment_method
    if order.fulfillment_status == FulfillmentStatus.PLACED:
        changes["fulfillment_status"] = FulfillmentStatus.CONFIRMED
        changes.update(stamp(order, FulfillmentStatus.CONFIRMED, now))

    return Transition(before=order, after=replace(order, **changes))


def apply_cancellation(
    order: Order,
    now: datetime,
    reason: Optional[str] = None,
) -> Transition:
    """Cancel the order and fail its payment.

    Reachable from every state except CANCELED itself. DELIVERED orders can
    only leave DELIVERED this way (refund); the caller posts the ledger
    reversal when ``Transition.reversal_required`` is set.

    Raises:
        ConflictError: if the order is already canceled
    """
    if order.is_canceled:
        raise ConflictError(f"Order {order.order_number} is already canceled")

    changes = {
        "fulfillment_status": FulfillmentStatus.CANCELED,
        "payment_status": PaymentStatus.FAILED,
        "updated_at": now,
    }
    changes.update(stamp(order, FulfillmentStatus.CANCELED, now))
    if reason:
        note = f"Canceled: {reason}"
        changes["internal_notes"] = (
            f"{order.internal_notes}\n{note}" if order.internal_notes else note
        )
    return Transition(before=order, after=replace(order, **changes))
