"""Tests for SMS template validation and rendering."""
from datetime import datetime
from decimal import Decimal

import pytest

from core.application.services.template_renderer import (
    FALLBACK_MESSAGES,
    PLACEHOLDERS,
    TRIGGER_DESCRIPTIONS,
    TemplateRenderer,
    extract_placeholders,
)
from core.domain.entities import CustomerSnapshot, Order, OrderItem
from core.domain.enums import FulfillmentType, OrderSource, PaymentMethod, TriggerEvent
from core.domain.exceptions import ValidationError
from core.settings.modules import StorefrontSettings


@pytest.fixture
def renderer():
    storefront = StorefrontSettings(frontend_url="https://shop.example.bt/", support_phone="17123456")
    return TemplateRenderer(storefront, max_length=120)


@pytest.fixture
def order():
    return Order(
        id=7,
        order_number="ORD-2025-0007",
        customer=CustomerSnapshot(id=3, name=None, phone="17654321"),
        order_source=OrderSource.ONLINE,
        fulfillment_type=FulfillmentType.DELIVERY,
        shipping_address="Norzin Lam, Thimphu",
        items=(
            OrderItem(
                product_id=1,
                quantity=2,
                unit_price=Decimal("600"),
                discount_applied=Decimal("20"),
            ),
        ),
        subtotal=Decimal("1180.00"),
        discount=Decimal("10.00"),
        delivery_cost=Decimal("50.00"),
        total_payable=Decimal("1220.00"),
        payment_method=PaymentMethod.MBOB,
        driver_name="Tashi",
        placed_at=datetime(2025, 3, 9, 8, 30),
    )


class TestValidate:

    def test_known_placeholders_pass(self, renderer):
        renderer.validate("Hi {{customerName}}, {{orderNumber}} costs {{totalAmount}}")

    def test_unknown_placeholders_are_listed(self, renderer):
        with pytest.raises(ValidationError) as exc_info:
            renderer.validate("Hi {{customer}} {{orderNumber}} {{eta}}")

        assert exc_info.value.details["invalid"] == ["customer", "eta"]

    def test_length_limit(self, renderer):
        with pytest.raises(ValidationError):
            renderer.validate("x" * 121)


class TestRender:

    def test_substitutes_order_values(self, renderer, order):
        rendered = renderer.render(
            "{{customerName}} {{orderNumber}} {{totalAmount}} {{orderDate}} {{paymentMethod}}",
            order,
        )

        assert rendered == "Customer ORD-2025-0007 Nu. 1,220.00 Mar 9, 2025 MBOB"

    def test_discount_covers_lines_and_order_level(self, renderer, order):
        assert renderer.render("{{orderDiscount}}", order) == "30.00"

    def test_links_and_support_phone(self, renderer, order):
        rendered = renderer.render("{{trackingLink}} {{supportPhone}}", order)

        assert rendered == "https://shop.example.bt/track/ORD-2025-0007 17123456"

    def test_additional_values_take_precedence(self, renderer, order):
        rendered = renderer.render(
            "{{driverName}} {{feedbackLink}}",
            order,
            {"driverName": "Karma", "feedbackLink": "https://x.bt/f/1"},
        )

        assert rendered == "Karma https://x.bt/f/1"

    def test_unknown_and_missing_values_render_empty(self, renderer, order):
        assert renderer.render("[{{nope}}][{{vehicleNumber}}][{{feedbackLink}}]", order) == "[][][]"

    def test_over_long_output_is_truncated(self, renderer, order):
        rendered = renderer.render("{{trackingLink}}" * 5, order)

        assert len(rendered) == 120


def test_extract_placeholders_keeps_order_and_duplicates():
    assert extract_placeholders("{{a}} {{b}} {{a}} {b}") == ["a", "b", "a"]


def test_every_trigger_is_described_and_has_a_fallback():
    assert set(TRIGGER_DESCRIPTIONS) == set(TriggerEvent)
    assert set(FALLBACK_MESSAGES) == set(TriggerEvent)
    for message in FALLBACK_MESSAGES.values():
        assert set(extract_placeholders(message)) <= set(PLACEHOLDERS)
