"""SQLAlchemy ORM models for catalog lookups and customers."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from core.utils.datetime import utc_now

from .base import Base


class ProductCategoryModel(Base):
    """SQLAlchemy ORM model for product_categories table."""

    __tablename__ = "product_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    subcategories = relationship("ProductSubCategoryModel", back_populates="category")


class ProductSubCategoryModel(Base):
    """SQLAlchemy ORM model for product_sub_categories table."""

    __tablename__ = "product_sub_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("product_categories.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    category = relationship("ProductCategoryModel", back_populates="subcategories")


class ProductModel(Base):
    """SQLAlchemy ORM model for products table."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    sub_category_id = Column(Integer, ForeignKey("product_sub_categories.id"), nullable=True, index=True)
    sales_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now)

    sub_category = relationship("ProductSubCategoryModel", lazy="joined")


class CustomerModel(Base):
    """SQLAlchemy ORM model for customers table."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True, unique=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utc_now)
