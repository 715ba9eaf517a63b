"""Tests for SMS template administration."""
import pytest

from apps.api.deps import build_renderer
from core.application.dtos import (
    CreateTemplateRequest,
    PreviewTemplateRequest,
    UpdateTemplateRequest,
)
from core.application.services import TemplateService
from core.domain.commands import CreateOrderCommand, CustomerInput, OrderLineInput
from core.domain.enums import FulfillmentType, OrderSource, TriggerEvent
from core.domain.exceptions import NotFoundError, ValidationError


@pytest.fixture
def template_service(session_factory, app_settings):
    return TemplateService(session_factory, build_renderer(app_settings))


def create_request(**overrides) -> CreateTemplateRequest:
    fields = dict(
        name="  Shipped  ",
        trigger_event=TriggerEvent.PROCESSING_TO_SHIPPING,
        message="{{customerName}}, {{orderNumber}} is on its way with {{driverName}}",
        send_count=2,
        send_delay=15,
    )
    fields.update(overrides)
    return CreateTemplateRequest(**fields)


@pytest.mark.asyncio
async def test_create_get_and_list(template_service):
    created = await template_service.create_template(create_request())

    fetched = await template_service.get_template(created.id)
    listed = await template_service.list_templates(trigger_event=TriggerEvent.PROCESSING_TO_SHIPPING)
    other = await template_service.list_templates(trigger_event=TriggerEvent.ORDER_PLACED)

    assert created.name == "Shipped"
    assert (fetched.id, fetched.message, fetched.send_delay) == (created.id, created.message, 15)
    assert [t.id for t in listed] == [created.id]
    assert other == []


@pytest.mark.asyncio
async def test_create_rejects_unknown_placeholders(template_service):
    with pytest.raises(ValidationError) as exc_info:
        await template_service.create_template(create_request(message="Hi {{firstName}}"))

    assert exc_info.value.details["invalid"] == ["firstName"]
    assert await template_service.list_templates() == []


@pytest.mark.asyncio
async def test_update_applies_only_given_fields(template_service):
    created = await template_service.create_template(
        create_request(order_source=OrderSource.ONLINE)
    )

    updated = await template_service.update_template(
        created.id, UpdateTemplateRequest(is_active=False, order_source=None, priority=3)
    )

    assert updated.is_active is False
    assert updated.order_source is None
    assert updated.priority == 3
    assert updated.message == created.message
    assert updated.send_count == 2


@pytest.mark.asyncio
async def test_update_validates_message(template_service):
    created = await template_service.create_template(create_request())

    with pytest.raises(ValidationError):
        await template_service.update_template(
            created.id, UpdateTemplateRequest(message="{{unknown}}")
        )


@pytest.mark.asyncio
async def test_delete(template_service):
    created = await template_service.create_template(create_request())

    await template_service.delete_template(created.id)

    with pytest.raises(NotFoundError):
        await template_service.get_template(created.id)
    with pytest.raises(NotFoundError):
        await template_service.delete_template(created.id)


@pytest.mark.asyncio
async def test_preview_renders_against_order(template_service, order_service, catalog):
    order = await order_service.create_order(
        CreateOrderCommand(
            customer=CustomerInput(name="Dechen", phone="77123456"),
            items=(OrderLineInput(catalog["orange"], 3),),
            fulfillment_type=FulfillmentType.PICKUP,
        )
    )

    preview = await template_service.preview(
        PreviewTemplateRequest(
            message="{{customerName}} owes {{totalAmount}} on {{orderNumber}} {{driverName}}",
            order_id=order.id,
            additional={"driverName": "Ugyen"},
        )
    )

    assert preview.rendered == f"Dechen owes Nu. 150.00 on {order.order_number} Ugyen"
    assert preview.length == len(preview.rendered)
    assert preview.placeholders == ["customerName", "totalAmount", "orderNumber", "driverName"]

    with pytest.raises(NotFoundError):
        await template_service.preview(PreviewTemplateRequest(message="hi", order_id=999))


def test_catalogues(template_service):
    placeholders = {p.name for p in template_service.placeholders()}
    triggers = {t.event for t in template_service.triggers()}

    assert {"customerName", "feedbackLink", "trackingLink"} <= placeholders
    assert triggers == set(TriggerEvent)
