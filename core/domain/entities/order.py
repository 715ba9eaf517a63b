"""
Order aggregate root.

Orders are immutable snapshots: every lifecycle operation returns a new
``Order`` built with ``dataclasses.replace``.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..enums import (
    FulfillmentStatus,
    FulfillmentType,
    OrderSource,
    PaymentMethod,
    PaymentStatus,
)
from ..value_objects import quantize_money, to_decimal


@dataclass(frozen=True)
class CustomerSnapshot:
    """Customer contact details as known when the order was read."""
    id: Optional[int]
    name: Optional[str]
    phone: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class OrderItem:
    """Individual line item within an order.

    ``unit_price`` is a price snapshot, independent of later catalog edits.
    """
    product_id: int
    quantity: int
    unit_price: Decimal
    discount_applied: Decimal = Decimal("0")
    line_total: Optional[Decimal] = None
    id: Optional[int] = None

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {self.quantity}")
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        object.__setattr__(self, "discount_applied", to_decimal(self.discount_applied))
        if self.unit_price < 0:
            raise ValueError(f"Unit price cannot be negative, got {self.unit_price}")
        if self.discount_applied < 0:
            raise ValueError("Discount applied cannot be negative")
        expected = quantize_money(self.gross_total - self.discount_applied)
        if self.line_total is None:
            object.__setattr__(self, "line_total", expected)
        elif quantize_money(self.line_total) != expected:
            raise ValueError(f"Line total mismatch: {self.line_total} vs {expected}")

    @property
    def gross_total(self) -> Decimal:
        """quantity × unit price, before any discount."""
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderDiscount:
    """Audit record: one applied discount rule on one order. Write-once."""
    discount_id: int
    discount_amount: Decimal
    discount_name: str
    discount_type: str
    voucher_code: Optional[str] = None
    applied_at: Optional[datetime] = None
    order_id: Optional[int] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class Order:
    """
    Order aggregate root.

    Timestamps are set at most once and never cleared. ``receipt_number``
    is allocated exactly once, before the first ledger posting.
    """
    id: Optional[int]
    order_number: str
    customer: CustomerSnapshot
    order_source: OrderSource
    fulfillment_type: FulfillmentType
    items: Tuple[OrderItem, ...] = field(default_factory=tuple)

    # Totals
    subtotal: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    delivery_cost: Decimal = Decimal("0")
    total_payable: Decimal = Decimal("0")

    # Status
    fulfillment_status: FulfillmentStatus = FulfillmentStatus.PLACED
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[PaymentMethod] = None

    # Lifecycle timestamps
    placed_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    processing_at: Optional[datetime] = None
    shipping_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    # Voucher / affiliate
    voucher_code: Optional[str] = None
    affiliate_id: Optional[int] = None

    # Receipt
    receipt_generated: bool = False
    receipt_number: Optional[str] = None

    # Delivery
    shipping_address: Optional[str] = None
    delivery_notes: Optional[str] = None
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    vehicle_number: Optional[str] = None

    feedback_token: Optional[str] = None
    internal_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.fulfillment_type == FulfillmentType.DELIVERY and not (
            self.shipping_address and self.shipping_address.strip()
        ):
            raise ValueError("Shipping address is required for delivery orders")
        if self.total_payable < 0:
            raise ValueError("Total payable cannot be negative")

    @property
    def is_receipted(self) -> bool:
        return self.receipt_generated and bool(self.receipt_number)

    @property
    def is_canceled(self) -> bool:
        return self.fulfillment_status == FulfillmentStatus.CANCELED

    @property
    def gross_items_total(self) -> Decimal:
        """Σ quantity × unit price over all lines, before discounts."""
        return sum((item.gross_total for item in self.items), Decimal("0"))

    @property
    def total_before_discount(self) -> Decimal:
        """Commission base: gross items total plus delivery cost."""
        return quantize_money(self.gross_items_total + self.delivery_cost)
