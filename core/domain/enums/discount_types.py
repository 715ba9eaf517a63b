"""Discount rule enums."""
from enum import Enum


class DiscountType(str, Enum):
    """Which products a discount rule targets."""

    ALL_PRODUCTS = "ALL_PRODUCTS"
    SELECTED_PRODUCTS = "SELECTED_PRODUCTS"
    SELECTED_CATEGORIES = "SELECTED_CATEGORIES"


class DiscountValueType(str, Enum):
    """How the rule value is interpreted."""

    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class DiscountScope(str, Enum):
    """Whether the rule applies per line or once on the order subtotal."""

    PER_PRODUCT = "PER_PRODUCT"
    ORDER_TOTAL = "ORDER_TOTAL"
