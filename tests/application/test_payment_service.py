"""Tests for the gateway payment flow."""
from decimal import Decimal

import pytest

from core.application.services import PaymentService
from core.domain.commands import CancelOrderCommand, CreateOrderCommand, CustomerInput, OrderLineInput
from core.domain.enums import FulfillmentStatus, FulfillmentType, PaymentMethod, PaymentStatus
from core.domain.exceptions import ConflictError, ValidationError
from core.infrastructure.adapters.payments import MockPaymentGateway


@pytest.fixture
def gateway():
    return MockPaymentGateway()


@pytest.fixture
def payment_service(gateway, order_service):
    return PaymentService(gateway, order_service)


@pytest.fixture
def new_order(order_service, catalog):
    async def _create():
        return await order_service.create_order(
            CreateOrderCommand(
                customer=CustomerInput(name="Pema", phone="17123456"),
                items=(OrderLineInput(catalog["cheese"], 1),),
                fulfillment_type=FulfillmentType.PICKUP,
            )
        )

    return _create


@pytest.mark.asyncio
async def test_initiate_then_confirm_marks_order_paid(payment_service, gateway, new_order):
    order = await new_order()

    started = await payment_service.initiate(order.id, PaymentMethod.BDB_EPAY)
    paid = await payment_service.confirm_payment(order.id, started.reference, PaymentMethod.BDB_EPAY)

    assert started.success
    assert gateway.initiated[started.reference] == Decimal("250.00")
    assert paid.payment_status == PaymentStatus.PAID
    assert paid.payment_method == PaymentMethod.BDB_EPAY
    assert paid.fulfillment_status == FulfillmentStatus.CONFIRMED


@pytest.mark.asyncio
async def test_declined_payment_cancels_order(payment_service, gateway, new_order):
    order = await new_order()
    started = await payment_service.initiate(order.id, PaymentMethod.TPAY)
    gateway.declined.add(started.reference)

    result = await payment_service.confirm_payment(order.id, started.reference, PaymentMethod.TPAY)

    assert result.payment_status == PaymentStatus.FAILED
    assert result.fulfillment_status == FulfillmentStatus.CANCELED
    assert result.internal_notes == "Canceled: Payment declined"


@pytest.mark.asyncio
async def test_initiate_refuses_paid_and_canceled_orders(payment_service, order_service, new_order):
    paid = await new_order()
    reference = (await payment_service.initiate(paid.id, PaymentMethod.MBOB)).reference
    await payment_service.confirm_payment(paid.id, reference, PaymentMethod.MBOB)

    canceled = await new_order()
    await order_service.cancel_order(CancelOrderCommand(order_id=canceled.id))

    with pytest.raises(ConflictError):
        await payment_service.initiate(paid.id, PaymentMethod.MBOB)
    with pytest.raises(ValidationError):
        await payment_service.initiate(canceled.id, PaymentMethod.MBOB)
