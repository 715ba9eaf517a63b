"""Database models."""

from .base import Base
from .accounting_model import AffiliateCommissionModel, AffiliateModel, LedgerEntryModel
from .catalog_model import (
    CustomerModel,
    ProductCategoryModel,
    ProductModel,
    ProductSubCategoryModel,
)
from .discount_model import (
    DiscountModel,
    discount_categories,
    discount_products,
    discount_subcategories,
)
from .notification_model import OutboxModel, SmsTemplateModel
from .order_model import OrderDiscountModel, OrderItemModel, OrderModel

__all__ = [
    "AffiliateCommissionModel",
    "AffiliateModel",
    "Base",
    "CustomerModel",
    "DiscountModel",
    "LedgerEntryModel",
    "OrderDiscountModel",
    "OrderItemModel",
    "OrderModel",
    "OutboxModel",
    "ProductCategoryModel",
    "ProductModel",
    "ProductSubCategoryModel",
    "SmsTemplateModel",
    "discount_categories",
    "discount_products",
    "discount_subcategories",
]
