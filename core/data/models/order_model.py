"""SQLAlchemy ORM models for Order aggregate."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from core.utils.datetime import utc_now

from .base import Base


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String(32), unique=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    order_source = Column(String(20), nullable=False, default="ONLINE")
    fulfillment_type = Column(String(20), nullable=False, default="DELIVERY")

    # Totals
    sub_total = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    delivery_cost = Column(Numeric(12, 2), nullable=False, default=0)
    total_payable = Column(Numeric(12, 2), nullable=False, default=0)

    # Status
    fulfillment_status = Column(String(20), nullable=False, default="PLACED")
    payment_status = Column(String(20), nullable=False, default="PENDING")
    payment_method = Column(String(20), nullable=True)

    # Lifecycle timestamps
    placed_at = Column(DateTime, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    processing_at = Column(DateTime, nullable=True)
    shipping_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)
    canceled_at = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)

    voucher_code = Column(String(64), nullable=True)
    affiliate_id = Column(Integer, ForeignKey("affiliates.id"), nullable=True, index=True)

    receipt_generated = Column(Boolean, default=False, nullable=False)
    receipt_number = Column(String(32), unique=True, nullable=True)

    # Delivery
    shipping_address = Column(Text, nullable=True)
    delivery_notes = Column(Text, nullable=True)
    driver_name = Column(String(255), nullable=True)
    driver_phone = Column(String(32), nullable=True)
    vehicle_number = Column(String(32), nullable=True)

    feedback_token = Column(String(64), unique=True, nullable=True)
    internal_notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    customer = relationship("CustomerModel", lazy="joined", innerjoin=True)
    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItemModel.id",
    )
    discounts = relationship(
        "OrderDiscountModel", back_populates="order", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_orders_fulfillment_status", "fulfillment_status"),
        Index("ix_orders_payment_status", "payment_status"),
        Index("ix_orders_placed_at", "placed_at"),
    )


class OrderItemModel(Base):
    """SQLAlchemy ORM model for order_items table."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    discount_applied = Column(Numeric(12, 2), nullable=False, default=0)
    line_total = Column(Numeric(12, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")


class OrderDiscountModel(Base):
    """SQLAlchemy ORM model for order_discounts table (write-once audit)."""

    __tablename__ = "order_discounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    discount_id = Column(Integer, ForeignKey("discounts.id"), nullable=False, index=True)
    discount_amount = Column(Numeric(12, 2), nullable=False)
    discount_name = Column(String(255), nullable=False)
    discount_type = Column(String(32), nullable=False)
    voucher_code = Column(String(64), nullable=True)
    applied_at = Column(DateTime, default=utc_now, nullable=False)

    order = relationship("OrderModel", back_populates="discounts")
