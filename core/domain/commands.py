"""
Order commands.

One frozen command type per lifecycle operation. Commands validate their
own shape on construction so a malformed request fails before any
repository is touched.

CRITICAL: This file must contain ZERO imports from sqlalchemy/pydantic/fastapi.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, Union

from .entities.discount import normalize_voucher
from .enums import (
    FulfillmentStatus,
    FulfillmentType,
    OrderSource,
    PaymentMethod,
    PaymentStatus,
)
from .exceptions import ValidationError
from .value_objects import to_decimal


@dataclass(frozen=True)
class CustomerInput:
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self):
        if self.id is None and not (self.name and self.name.strip()):
            raise ValidationError("Customer name is required")


@dataclass(frozen=True)
class OrderLineInput:
    product_id: int
    quantity: int

    def __post_init__(self):
        if self.quantity < 1:
            raise ValidationError(
                f"Quantity for product {self.product_id} must be at least 1",
                {"product_id": self.product_id},
            )


@dataclass(frozen=True)
class CreateOrderCommand:
    customer: CustomerInput
    items: Tuple[OrderLineInput, ...]
    order_source: OrderSource = OrderSource.ONLINE
    fulfillment_type: FulfillmentType = FulfillmentType.DELIVERY
    shipping_address: Optional[str] = None
    delivery_notes: Optional[str] = None
    delivery_cost: Decimal = Decimal("0")
    payment_method: Optional[PaymentMethod] = None
    voucher_code: Optional[str] = None
    internal_notes: Optional[str] = None

    def __post_init__(self):
        if not self.items:
            raise ValidationError("Order must contain at least one item")
        product_ids = [line.product_id for line in self.items]
        if len(set(product_ids)) != len(product_ids):
            raise ValidationError("Each product may appear only once per order")
        object.__setattr__(self, "delivery_cost", to_decimal(self.delivery_cost))
        if self.delivery_cost < 0:
            raise ValidationError("Delivery cost cannot be negative")
        if self.fulfillment_type == FulfillmentType.DELIVERY and not (
            self.shipping_address and self.shipping_address.strip()
        ):
            raise ValidationError("Shipping address is required for delivery orders")
        object.__setattr__(self, "voucher_code", normalize_voucher(self.voucher_code))


@dataclass(frozen=True)
class PlaceCounterOrderCommand:
    """Walk-in purchase paid on the spot."""
    order: CreateOrderCommand

    def __post_init__(self):
        if self.order.order_source != OrderSource.COUNTER:
            raise ValidationError("Order source must be COUNTER for instore orders")
        if self.order.payment_method is None:
            raise ValidationError("Payment must be made to create order instore")


@dataclass(frozen=True)
class UpdateFulfillmentCommand:
    order_id: int
    status: FulfillmentStatus
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    vehicle_number: Optional[str] = None


@dataclass(frozen=True)
class UpdatePaymentCommand:
    order_id: int
    status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class CancelOrderCommand:
    order_id: int
    reason: Optional[str] = None


@dataclass(frozen=True)
class MarkDeliveredCommand:
    order_id: int


@dataclass(frozen=True)
class UpdateOrderCommand:
    """Editable fields while the order is not terminal.

    ``voucher_code=""`` clears the voucher; ``None`` leaves it untouched.
    """
    order_id: int
    internal_notes: Optional[str] = None
    delivery_notes: Optional[str] = None
    delivery_cost: Optional[Decimal] = None
    voucher_code: Optional[str] = None

    def __post_init__(self):
        if self.delivery_cost is not None:
            object.__setattr__(self, "delivery_cost", to_decimal(self.delivery_cost))
            if self.delivery_cost < 0:
                raise ValidationError("Delivery cost cannot be negative")


OrderCommand = Union[
    CreateOrderCommand,
    PlaceCounterOrderCommand,
    UpdateFulfillmentCommand,
    UpdatePaymentCommand,
    CancelOrderCommand,
    MarkDeliveredCommand,
    UpdateOrderCommand,
]
