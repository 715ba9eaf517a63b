"""
Discount rule entity.

CRITICAL: This file must contain ZERO imports from sqlalchemy/pydantic/fastapi.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import FrozenSet, Optional

from ..enums import DiscountScope, DiscountType, DiscountValueType
from ..value_objects import to_decimal


def normalize_voucher(code: Optional[str]) -> Optional[str]:
    """Trim and upper-case a voucher code. Blank codes become None."""
    if code is None:
        return None
    code = code.strip().upper()
    return code or None


@dataclass(frozen=True)
class Discount:
    """
    Time-boxed, optionally voucher-gated discount rule.

    A rule without a voucher code is applied automatically.
    """
    id: Optional[int]
    name: str
    discount_type: DiscountType
    value_type: DiscountValueType
    value: Decimal
    scope: DiscountScope
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    voucher_code: Optional[str] = None
    max_usage_count: Optional[int] = None
    min_order_value: Optional[Decimal] = None
    usage_count: int = 0
    description: Optional[str] = None
    product_ids: FrozenSet[int] = field(default_factory=frozenset)
    category_ids: FrozenSet[int] = field(default_factory=frozenset)
    subcategory_ids: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "value", to_decimal(self.value))
        if self.value < 0:
            raise ValueError("Discount value cannot be negative")
        if self.value_type == DiscountValueType.PERCENTAGE and self.value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        if self.end_date < self.start_date:
            raise ValueError("Discount end date must not precede its start date")
        if self.max_usage_count is not None and self.max_usage_count < 1:
            raise ValueError("Max usage count must be positive")
        if self.min_order_value is not None:
            object.__setattr__(self, "min_order_value", to_decimal(self.min_order_value))

    def is_live(self, now: datetime) -> bool:
        """Active flag set and ``now`` inside the validity window."""
        return self.is_active and self.start_date <= now <= self.end_date

    def matches_voucher(self, voucher_code: Optional[str]) -> bool:
        """Voucher gate: auto-apply rules only without a voucher, voucher rules only with theirs."""
        supplied = normalize_voucher(voucher_code)
        own = normalize_voucher(self.voucher_code)
        if supplied is None:
            return own is None
        return own == supplied

    def meets_minimum(self, subtotal: Decimal) -> bool:
        return self.min_order_value is None or self.min_order_value <= subtotal

    def is_exhausted(self) -> bool:
        return self.max_usage_count is not None and self.usage_count >= self.max_usage_count

    def amount_for(self, base: Decimal) -> Decimal:
        """Raw discount for ``base``. FIXED_AMOUNT is flat, never scaled by quantity."""
        if self.value_type == DiscountValueType.PERCENTAGE:
            return base * self.value / Decimal("100")
        return self.value
