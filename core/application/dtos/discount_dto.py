"""DTOs for the discount preview."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.enums import DiscountType


class DiscountPreviewItem(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0)

    model_config = {"frozen": True}


class DiscountPreviewRequest(BaseModel):
    items: List[DiscountPreviewItem] = Field(..., min_length=1)
    voucher_code: Optional[str] = None

    model_config = {"frozen": True}


class LineItemDiscountDTO(BaseModel):
    product_id: int
    amount: Decimal
    discount_id: int
    discount_type: DiscountType

    model_config = {"frozen": True}


class AppliedDiscountDTO(BaseModel):
    discount_id: int
    name: str
    discount_type: DiscountType
    amount: Decimal
    voucher_code: Optional[str] = None

    model_config = {"frozen": True}


class DiscountCalculationDTO(BaseModel):
    """Read-only price preview. No usage counters are touched."""

    order_discount: Decimal
    line_item_discounts: List[LineItemDiscountDTO] = Field(default_factory=list)
    applied_discounts: List[AppliedDiscountDTO] = Field(default_factory=list)
    discount_breakdown: str = ""
    subtotal_before_discount: Decimal
    subtotal_after_discount: Decimal
    final_total: Decimal

    model_config = {"frozen": True}
