"""
Tests for the order state machine.

Transitions are pure functions over Order snapshots, so no database is needed.
"""
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from core.domain import state_machine
from core.domain.entities import CustomerSnapshot, Order, OrderItem
from core.domain.enums import (
    FulfillmentStatus,
    FulfillmentType,
    OrderSource,
    PaymentMethod,
    PaymentStatus,
    TriggerEvent,
)
from core.domain.exceptions import ConflictError, ValidationError

NOW = datetime(2025, 3, 1, 9, 0, 0)


def make_order(**overrides) -> Order:
    fields = dict(
        id=1,
        order_number="ORD-2025-0001",
        customer=CustomerSnapshot(id=1, name="Pema", phone="17123456"),
        order_source=OrderSource.ONLINE,
        fulfillment_type=FulfillmentType.PICKUP,
        items=(OrderItem(product_id=1, quantity=2, unit_price=Decimal("100")),),
        subtotal=Decimal("200.00"),
        total_payable=Decimal("200.00"),
        placed_at=NOW - timedelta(hours=1),
    )
    fields.update(overrides)
    return Order(**fields)


class TestFulfillmentTransitions:

    def test_legal_move_sets_status_and_timestamp(self):
        order = make_order(fulfillment_status=FulfillmentStatus.CONFIRMED)

        transition = state_machine.apply_fulfillment(order, FulfillmentStatus.PROCESSING, NOW)

        assert transition.after.fulfillment_status == FulfillmentStatus.PROCESSING
        assert transition.after.processing_at == NOW
        assert transition.event == TriggerEvent.CONFIRMED_TO_PROCESSING
        assert transition.before is order

    def test_illegal_jump_is_rejected(self):
        order = make_order()

        with pytest.raises(ValidationError):
            state_machine.apply_fulfillment(order, FulfillmentStatus.SHIPPING, NOW)

    @pytest.mark.parametrize("terminal", [FulfillmentStatus.DELIVERED, FulfillmentStatus.CANCELED])
    def test_terminal_states_have_no_exits(self, terminal):
        order = make_order(fulfillment_status=terminal)

        for target in (FulfillmentStatus.CONFIRMED, FulfillmentStatus.PROCESSING):
            with pytest.raises(ValidationError):
                state_machine.apply_fulfillment(order, target, NOW)

    def test_same_status_is_a_noop(self):
        order = make_order(fulfillment_status=FulfillmentStatus.CONFIRMED)

        transition = state_machine.apply_fulfillment(order, FulfillmentStatus.CONFIRMED, NOW)

        assert not transition.changed
        assert transition.event is None

    def test_existing_timestamp_is_never_overwritten(self):
        earlier = NOW - timedelta(days=2)
        order = make_order(fulfillment_status=FulfillmentStatus.PROCESSING, shipping_at=earlier)

        after = state_machine.apply_fulfillment(order, FulfillmentStatus.SHIPPING, NOW).after

        assert after.shipping_at == earlier

    def test_driver_details_are_recorded_and_none_ignored(self):
        order = make_order(fulfillment_status=FulfillmentStatus.PROCESSING, driver_phone="17999999")

        after = state_machine.apply_fulfillment(
            order,
            FulfillmentStatus.SHIPPING,
            NOW,
            driver_name="Tashi",
            driver_phone=None,
            vehicle_number="BP-1-A1234",
        ).after

        assert after.driver_name == "Tashi"
        assert after.driver_phone == "17999999"
        assert after.vehicle_number == "BP-1-A1234"

    def test_delivered_flag(self):
        order = make_order(fulfillment_status=FulfillmentStatus.SHIPPING)

        transition = state_machine.apply_fulfillment(order, FulfillmentStatus.DELIVERED, NOW)

        assert transition.delivered
        assert transition.event == TriggerEvent.SHIPPING_TO_DELIVERED


class TestPaymentTransitions:

    def test_paid_while_placed_auto_confirms_with_single_event(self):
        order = make_order()

        transition = state_machine.apply_payment(order, PaymentStatus.PAID, NOW, PaymentMethod.MBOB)

        assert transition.after.payment_status == PaymentStatus.PAID
        assert transition.after.fulfillment_status == FulfillmentStatus.CONFIRMED
        assert transition.after.confirmed_at == NOW
        assert transition.after.paid_at == NOW
        assert transition.after.payment_method == PaymentMethod.MBOB
        assert transition.payment_completed
        assert transition.event == TriggerEvent.PLACED_TO_CONFIRMED

    def test_paid_after_confirmation_keeps_fulfillment(self):
        order = make_order(fulfillment_status=FulfillmentStatus.PROCESSING)

        after = state_machine.apply_payment(order, PaymentStatus.PAID, NOW).after

        assert after.fulfillment_status == FulfillmentStatus.PROCESSING
        assert after.confirmed_at is None

    def test_paid_twice_is_a_conflict(self):
        order = make_order(payment_status=PaymentStatus.PAID)

        with pytest.raises(ConflictError):
            state_machine.apply_payment(order, PaymentStatus.PAID, NOW)

    def test_failed_payment_cannot_be_paid(self):
        order = make_order(
            fulfillment_status=FulfillmentStatus.CANCELED, payment_status=PaymentStatus.FAILED
        )

        with pytest.raises(ValidationError):
            state_machine.apply_payment(order, PaymentStatus.PAID, NOW)

    def test_failed_must_go_through_cancellation(self):
        with pytest.raises(ValidationError):
            state_machine.apply_payment(make_order(), PaymentStatus.FAILED, NOW)

    def test_paid_back_to_pending_is_rejected(self):
        order = make_order(payment_status=PaymentStatus.PAID)

        with pytest.raises(ValidationError):
            state_machine.apply_payment(order, PaymentStatus.PENDING, NOW)


class TestCancellation:

    def test_cancel_sets_status_payment_and_note(self):
        order = make_order(internal_notes="VIP")

        transition = state_machine.apply_cancellation(order, NOW, "customer request")

        after = transition.after
        assert after.fulfillment_status == FulfillmentStatus.CANCELED
        assert after.payment_status == PaymentStatus.FAILED
        assert after.canceled_at == NOW
        assert after.internal_notes == "VIP\nCanceled: customer request"
        assert transition.event == TriggerEvent.ORDER_CANCELED
        assert not transition.reversal_required

    def test_cancel_of_receipted_delivered_order_requires_reversal(self):
        order = make_order(
            fulfillment_status=FulfillmentStatus.DELIVERED,
            payment_status=PaymentStatus.PAID,
            receipt_generated=True,
            receipt_number="RCP-2025-0001",
        )

        transition = state_machine.apply_cancellation(order, NOW, "refund")

        assert transition.reversal_required
        assert transition.event == TriggerEvent.PAYMENT_FAILED

    def test_cancel_twice_is_a_conflict(self):
        order = replace(make_order(), fulfillment_status=FulfillmentStatus.CANCELED)

        with pytest.raises(ConflictError):
            state_machine.apply_cancellation(order, NOW)

    def test_fulfillment_update_to_canceled_routes_to_cancellation(self):
        transition = state_machine.apply_fulfillment(make_order(), FulfillmentStatus.CANCELED, NOW)

        assert transition.after.payment_status == PaymentStatus.FAILED
