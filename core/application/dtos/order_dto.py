"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.commands import (
    CreateOrderCommand,
    CustomerInput,
    OrderLineInput,
    PlaceCounterOrderCommand,
)
from core.domain.enums import (
    FulfillmentStatus,
    FulfillmentType,
    OrderSource,
    PaymentMethod,
    PaymentStatus,
)


class CustomerRequest(BaseModel):
    """Customer details supplied with a new order."""

    id: Optional[int] = Field(None, description="Existing customer id")
    name: str = Field(default="", description="Customer name")
    phone: Optional[str] = Field(None, description="Phone number (used to find the customer)")
    email: Optional[str] = Field(None, description="Email address")

    model_config = {"frozen": True}


class OrderItemRequest(BaseModel):
    """Ordered product and quantity. Price comes from the catalog."""

    product_id: int = Field(..., description="Product id")
    quantity: int = Field(..., gt=0, description="Quantity ordered")

    model_config = {"frozen": True}


class CreateOrderRequest(BaseModel):
    """Request DTO for creating an order."""

    customer: CustomerRequest
    items: List[OrderItemRequest] = Field(..., min_length=1, description="Order items")
    order_source: OrderSource = Field(default=OrderSource.ONLINE, description="ONLINE or COUNTER")
    fulfillment_type: FulfillmentType = Field(default=FulfillmentType.DELIVERY)
    shipping_address: Optional[str] = Field(None, description="Required for DELIVERY")
    delivery_notes: Optional[str] = None
    delivery_cost: Decimal = Field(default=Decimal("0"), ge=0, description="Delivery cost")
    payment_method: Optional[PaymentMethod] = None
    voucher_code: Optional[str] = Field(None, description="Voucher code (case-insensitive)")
    internal_notes: Optional[str] = None

    model_config = {"frozen": True}

    def to_command(self) -> CreateOrderCommand:
        return CreateOrderCommand(
            customer=CustomerInput(
                id=self.customer.id,
                name=self.customer.name,
                phone=self.customer.phone,
                email=self.customer.email,
            ),
            items=tuple(
                OrderLineInput(product_id=item.product_id, quantity=item.quantity)
                for item in self.items
            ),
            order_source=self.order_source,
            fulfillment_type=self.fulfillment_type,
            shipping_address=self.shipping_address,
            delivery_notes=self.delivery_notes,
            delivery_cost=self.delivery_cost,
            payment_method=self.payment_method,
            voucher_code=self.voucher_code,
            internal_notes=self.internal_notes,
        )

    def to_counter_command(self) -> PlaceCounterOrderCommand:
        return PlaceCounterOrderCommand(order=self.to_command())


class UpdateFulfillmentRequest(BaseModel):
    status: FulfillmentStatus
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    vehicle_number: Optional[str] = None

    model_config = {"frozen": True}


class UpdatePaymentRequest(BaseModel):
    status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    reason: Optional[str] = Field(None, description="Recorded when the payment fails")

    model_config = {"frozen": True}


class CancelOrderRequest(BaseModel):
    reason: Optional[str] = None

    model_config = {"frozen": True}


class UpdateOrderRequest(BaseModel):
    """Editable fields. An empty ``voucher_code`` removes the voucher."""

    internal_notes: Optional[str] = None
    delivery_notes: Optional[str] = None
    delivery_cost: Optional[Decimal] = Field(None, ge=0)
    voucher_code: Optional[str] = None

    model_config = {"frozen": True}


class ConfirmPaymentRequest(BaseModel):
    reference: str = Field(..., min_length=1, description="Gateway payment reference")
    payment_method: PaymentMethod

    model_config = {"frozen": True}


class OrderItemDTO(BaseModel):
    """DTO for order item."""

    id: Optional[int] = None
    product_id: int = Field(..., description="Product id")
    quantity: int = Field(..., gt=0, description="Quantity ordered")
    unit_price: Decimal = Field(..., ge=0, description="Unit price at order time")
    discount_applied: Decimal = Field(default=Decimal("0"), ge=0)
    line_total: Decimal = Field(..., description="quantity x unit price - discount")

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: int
    order_number: str = Field(..., description="e.g. ORD-2025-0001")
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    order_source: OrderSource
    fulfillment_type: FulfillmentType
    items: List[OrderItemDTO] = Field(default_factory=list, description="Order items")
    subtotal: Decimal
    discount: Decimal
    delivery_cost: Decimal
    total_payable: Decimal
    fulfillment_status: FulfillmentStatus
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    placed_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    processing_at: Optional[datetime] = None
    shipping_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    voucher_code: Optional[str] = None
    affiliate_id: Optional[int] = None
    receipt_generated: bool = False
    receipt_number: Optional[str] = None
    shipping_address: Optional[str] = None
    delivery_notes: Optional[str] = None
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    vehicle_number: Optional[str] = None
    feedback_token: Optional[str] = None
    internal_notes: Optional[str] = None
    execution_id: Optional[str] = Field(None, description="Execution ID for tracing")

    model_config = {"frozen": True}


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    total: int = Field(..., ge=0, description="Number of orders returned")

    model_config = {"frozen": True}
