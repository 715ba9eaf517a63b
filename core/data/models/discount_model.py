"""SQLAlchemy ORM models for discount rules and their associations."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from core.utils.datetime import utc_now

from .base import Base

discount_products = Table(
    "discount_products",
    Base.metadata,
    Column("discount_id", Integer, ForeignKey("discounts.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
)

discount_categories = Table(
    "discount_categories",
    Base.metadata,
    Column("discount_id", Integer, ForeignKey("discounts.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("product_categories.id", ondelete="CASCADE"), primary_key=True),
)

discount_subcategories = Table(
    "discount_subcategories",
    Base.metadata,
    Column("discount_id", Integer, ForeignKey("discounts.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "sub_category_id",
        Integer,
        ForeignKey("product_sub_categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class DiscountModel(Base):
    """SQLAlchemy ORM model for discounts table."""

    __tablename__ = "discounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    discount_type = Column(String(32), nullable=False)
    value_type = Column(String(32), nullable=False)
    discount_value = Column(Numeric(12, 2), nullable=False)
    discount_scope = Column(String(32), nullable=False, default="PER_PRODUCT")
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    voucher_code = Column(String(64), unique=True, nullable=True)
    max_usage_count = Column(Integer, nullable=True)
    min_order_value = Column(Numeric(12, 2), nullable=True)
    usage_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    products = relationship("ProductModel", secondary=discount_products, lazy="selectin")
    categories = relationship("ProductCategoryModel", secondary=discount_categories, lazy="selectin")
    subcategories = relationship(
        "ProductSubCategoryModel", secondary=discount_subcategories, lazy="selectin"
    )

    __table_args__ = (
        Index("ix_discounts_active_window", "is_active", "start_date", "end_date"),
    )
