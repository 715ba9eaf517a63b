"""
SMS template rendering.

Placeholders use ``{{name}}`` syntax. Rendering is lenient (unknown names
become empty strings) while template validation is strict, so a template
that passed validation always renders every token it contains.
"""
import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Mapping, Optional

from core.domain.entities import Order
from core.domain.enums import TriggerEvent
from core.domain.exceptions import ValidationError
from core.domain.value_objects import Money
from core.settings.modules.storefront_settings import StorefrontSettings

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")

PLACEHOLDERS: Dict[str, str] = {
    "customerName": "Customer name",
    "customerPhone": "Customer phone number",
    "customerEmail": "Customer email",
    "orderNumber": "Order number (e.g. ORD-2025-0001)",
    "orderId": "Order ID",
    "orderDate": "Order date (formatted)",
    "totalAmount": "Total order amount (formatted)",
    "orderDiscount": "Discount amount",
    "subtotal": "Subtotal of order lines",
    "paymentMethod": "Payment method (CASH, MBOB, etc.)",
    "fulfillmentStatus": "Current fulfillment status",
    "paymentStatus": "Current payment status",
    "driverName": "Driver name (if available)",
    "driverPhone": "Driver phone (if available)",
    "vehicleNumber": "Vehicle number (if available)",
    "shippingCost": "Shipping cost",
    "feedbackLink": "Feedback link (for delivered orders)",
    "supportPhone": "Support phone number",
    "trackingLink": "Order tracking link",
}

TRIGGER_DESCRIPTIONS: Dict[TriggerEvent, str] = {
    TriggerEvent.ORDER_PLACED: "When order is first created",
    TriggerEvent.PLACED_TO_CONFIRMED: "Payment status: PENDING → PAID",
    TriggerEvent.CONFIRMED_TO_PROCESSING: "Fulfillment: CONFIRMED → PROCESSING",
    TriggerEvent.PROCESSING_TO_SHIPPING: "Fulfillment: PROCESSING → SHIPPING",
    TriggerEvent.SHIPPING_TO_DELIVERED: "Fulfillment: SHIPPING → DELIVERED",
    TriggerEvent.ORDER_CANCELED: "When order is canceled",
    TriggerEvent.PAYMENT_FAILED: "Payment status: PAID → FAILED",
    TriggerEvent.COUNTER_PAYMENT_RECEIPT: "Counter order created (payment receipt)",
}

# Used when no active template matches an event.
FALLBACK_MESSAGES: Dict[TriggerEvent, str] = {
    TriggerEvent.ORDER_PLACED: (
        "Thank you! Your order {{orderNumber}} has been received. "
        "We will notify you when it is confirmed."
    ),
    TriggerEvent.PLACED_TO_CONFIRMED: (
        "Your order {{orderNumber}} has been confirmed. We will update you on the next steps."
    ),
    TriggerEvent.CONFIRMED_TO_PROCESSING: (
        "Your order {{orderNumber}} is now being processed. We will notify you when it ships."
    ),
    TriggerEvent.PROCESSING_TO_SHIPPING: (
        "Your order {{orderNumber}} has been shipped! Track your delivery for updates."
    ),
    TriggerEvent.SHIPPING_TO_DELIVERED: (
        "Your order {{orderNumber}} has been delivered. Thank you for shopping with us!"
    ),
    TriggerEvent.ORDER_CANCELED: (
        "Your order {{orderNumber}} has been canceled. If you have questions, please contact us."
    ),
    TriggerEvent.PAYMENT_FAILED: (
        "Payment for order {{orderNumber}} could not be processed. "
        "Please try again or contact us."
    ),
    TriggerEvent.COUNTER_PAYMENT_RECEIPT: (
        "Thank you! Your order {{orderNumber}} payment has been received."
    ),
}


def extract_placeholders(message: str) -> List[str]:
    """Placeholder names in order of appearance (duplicates kept)."""
    return PLACEHOLDER_PATTERN.findall(message)


def _format_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def _format_amount(value: Decimal) -> str:
    return f"{value:,.2f}"


class TemplateRenderer:
    """Substitutes placeholders from an order snapshot."""

    def __init__(self, storefront: StorefrontSettings, max_length: int = 459) -> None:
        self._storefront = storefront
        self._max_length = max_length

    @property
    def max_length(self) -> int:
        return self._max_length

    def validate(self, message: str) -> None:
        """Reject unknown placeholders and over-long messages.

        Raises:
            ValidationError: listing the offending placeholders
        """
        if len(message) > self._max_length:
            raise ValidationError(
                f"Message is {len(message)} characters; the limit is {self._max_length}"
            )
        invalid = sorted({name for name in extract_placeholders(message) if name not in PLACEHOLDERS})
        if invalid:
            raise ValidationError(
                f"Invalid placeholders: {', '.join(invalid)}. "
                f"Valid placeholders: {', '.join(PLACEHOLDERS)}",
                {"invalid": invalid},
            )

    def values(self, order: Order, additional: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Every known placeholder resolved for ``order``."""
        additional = additional or {}
        symbol = self._storefront.currency_symbol
        customer = order.customer
        total_discount = order.gross_items_total - order.subtotal + order.discount

        feedback_link = additional.get("feedbackLink")
        if not feedback_link and order.feedback_token:
            feedback_link = self._storefront.feedback_link(order.feedback_token)

        return {
            "customerName": customer.name or "Customer",
            "customerPhone": customer.phone or "",
            "customerEmail": customer.email or "",
            "orderNumber": order.order_number or "",
            "orderId": str(order.id) if order.id is not None else "",
            "orderDate": _format_date(order.placed_at or order.created_at),
            "totalAmount": Money(order.total_payable).format(symbol),
            "orderDiscount": _format_amount(total_discount),
            "subtotal": _format_amount(order.subtotal),
            "paymentMethod": order.payment_method.value if order.payment_method else "",
            "fulfillmentStatus": order.fulfillment_status.value,
            "paymentStatus": order.payment_status.value,
            "driverName": additional.get("driverName") or order.driver_name or "",
            "driverPhone": additional.get("driverPhone") or order.driver_phone or "",
            "vehicleNumber": additional.get("vehicleNumber") or order.vehicle_number or "",
            "shippingCost": _format_amount(order.delivery_cost),
            "feedbackLink": feedback_link or "",
            "supportPhone": self._storefront.support_phone or "",
            "trackingLink": self._storefront.tracking_link(order.order_number),
        }

    def render(
        self,
        message: str,
        order: Order,
        additional: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Render ``message``; unknown placeholders become empty strings."""
        values = self.values(order, additional)
        rendered = PLACEHOLDER_PATTERN.sub(lambda match: values.get(match.group(1), ""), message)
        if len(rendered) > self._max_length:
            logger.warning(
                f"[Template Render] Message for order {order.order_number} is "
                f"{len(rendered)} characters, truncating to {self._max_length}"
            )
            rendered = rendered[: self._max_length]
        return rendered
