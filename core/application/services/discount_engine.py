"""
Discount engine.

Resolves which discount rules apply to a set of order lines and how much
each contributes. Evaluation is a pure function of the loaded rules and
products; the service wrapper only does the read-only lookups.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.data.uow import UnitOfWork, create_uow
from core.domain.entities import Discount, Product, normalize_voucher
from core.domain.enums import DiscountScope, DiscountType, DiscountValueType
from core.domain.exceptions import NotFoundError, ValidationError
from core.domain.value_objects import quantize_money
from core.utils.datetime import utc_now

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PricedLine:
    """Order line with its price snapshot, as fed to the engine."""
    product_id: int
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class LineItemDiscount:
    product_id: int
    amount: Decimal
    discount_id: int
    discount_type: DiscountType


@dataclass(frozen=True)
class AppliedDiscount:
    """A rule that contributed, with the exact amount it contributed."""
    discount: Discount
    amount: Decimal


@dataclass(frozen=True)
class DiscountCalculationResult:
    order_discount: Decimal
    line_item_discounts: Tuple[LineItemDiscount, ...]
    applied_discounts: Tuple[AppliedDiscount, ...]
    discount_breakdown: str
    subtotal_before_discount: Decimal
    subtotal_after_discount: Decimal
    final_total: Decimal

    def discount_for(self, product_id: int) -> Decimal:
        for line in self.line_item_discounts:
            if line.product_id == product_id:
                return line.amount
        return ZERO

    @property
    def line_discount_total(self) -> Decimal:
        return sum((line.amount for line in self.line_item_discounts), ZERO)


def _describe(discount: Discount, amount: Decimal, currency_symbol: str) -> str:
    if discount.value_type == DiscountValueType.PERCENTAGE:
        return f"{discount.value.normalize():f}% ({currency_symbol} {amount:.2f})"
    return f"{currency_symbol} {amount:.2f}"


def applicable_discounts(
    discounts: Sequence[Discount],
    voucher_code: Optional[str],
    subtotal: Decimal,
    now: datetime,
) -> List[Discount]:
    """Live rules passing the voucher gate, minimum order value and usage cap, in load order."""
    return [
        discount
        for discount in discounts
        if discount.is_live(now)
        and discount.matches_voucher(voucher_code)
        and discount.meets_minimum(subtotal)
        and not discount.is_exhausted()
    ]


def _matches(discount: Discount, product: Optional[Product], product_id: int) -> bool:
    if discount.discount_type == DiscountType.ALL_PRODUCTS:
        return True
    if discount.discount_type == DiscountType.SELECTED_PRODUCTS:
        return product_id in discount.product_ids
    if product is None or product.subcategory_id is None:
        return False
    return (
        product.subcategory_id in discount.subcategory_ids
        or (product.category_id is not None and product.category_id in discount.category_ids)
    )


def evaluate_discounts(
    lines: Sequence[PricedLine],
    discounts: Sequence[Discount],
    products: Dict[int, Product],
    voucher_code: Optional[str] = None,
    now: Optional[datetime] = None,
    currency_symbol: str = "Nu.",
) -> DiscountCalculationResult:
    """
    Compute per-line and order-level discounts.

    Rules are evaluated in load order. A product line receives at most one
    per-product discount (first match wins). ALL_PRODUCTS rules with
    ORDER_TOTAL scope apply once to the pre-discount subtotal; every other
    rule applies per matching line. Amounts are rounded to cents; a line
    discount never exceeds its line subtotal, and only the final total is
    floored at zero, so an order-level rule always reports its full value.
    """
    now = now or utc_now()
    subtotal = quantize_money(sum((line.subtotal for line in lines), ZERO))
    rules = applicable_discounts(discounts, voucher_code, subtotal, now)

    line_discounts: Dict[int, LineItemDiscount] = {}
    contributions: Dict[int, Decimal] = {}
    breakdown: List[str] = []
    order_discount = ZERO

    for rule in rules:
        if (
            rule.discount_type == DiscountType.ALL_PRODUCTS
            and rule.scope == DiscountScope.ORDER_TOTAL
        ):
            amount = quantize_money(rule.amount_for(subtotal))
            if amount > 0:
                order_discount += amount
                contributions[rule.id] = contributions.get(rule.id, ZERO) + amount
                breakdown.append(f"{rule.name}: {_describe(rule, amount, currency_symbol)}")
            continue

        for line in lines:
            if line.product_id in line_discounts:
                continue
            if not _matches(rule, products.get(line.product_id), line.product_id):
                continue
            line_subtotal = quantize_money(line.subtotal)
            amount = min(quantize_money(rule.amount_for(line_subtotal)), line_subtotal)
            if amount <= 0:
                continue
            line_discounts[line.product_id] = LineItemDiscount(
                product_id=line.product_id,
                amount=amount,
                discount_id=rule.id,
                discount_type=rule.discount_type,
            )
            contributions[rule.id] = contributions.get(rule.id, ZERO) + amount
            breakdown.append(
                f"{rule.name} on Product {line.product_id}: "
                f"{_describe(rule, amount, currency_symbol)}"
            )

    applied = tuple(
        AppliedDiscount(discount=rule, amount=contributions[rule.id])
        for rule in rules
        if rule.id in contributions
    )
    line_total = sum((d.amount for d in line_discounts.values()), ZERO)
    subtotal_after = subtotal - line_total - order_discount

    return DiscountCalculationResult(
        order_discount=order_discount,
        line_item_discounts=tuple(line_discounts.values()),
        applied_discounts=applied,
        discount_breakdown="; ".join(breakdown),
        subtotal_before_discount=subtotal,
        subtotal_after_discount=subtotal_after,
        final_total=max(ZERO, subtotal_after),
    )


class DiscountEngine:
    """
    Read-only discount resolution against the database.

    ``calculate`` runs inside a caller's unit of work (order creation);
    ``calculate_order_discounts`` opens its own for checkout previews.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        currency_symbol: str = "Nu.",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._currency_symbol = currency_symbol
        self._clock = clock

    async def calculate(
        self,
        uow: UnitOfWork,
        lines: Sequence[PricedLine],
        voucher_code: Optional[str] = None,
        products: Optional[Dict[int, Product]] = None,
    ) -> DiscountCalculationResult:
        now = self._clock()
        if products is None:
            products = await uow.catalog.get_products(line.product_id for line in lines)
        discounts = await uow.discounts.list_live(now)
        logger.info(
            f"[Discount Calculation] {len(lines)} line(s), {len(discounts)} live discount(s), "
            f"voucher={normalize_voucher(voucher_code)}"
        )
        result = evaluate_discounts(
            lines,
            discounts,
            products,
            voucher_code=voucher_code,
            now=now,
            currency_symbol=self._currency_symbol,
        )
        logger.info(
            f"[Discount Calculation] line discounts={result.line_discount_total}, "
            f"order discount={result.order_discount}, final total={result.final_total}"
        )
        return result

    async def calculate_order_discounts(
        self,
        items: Sequence[Tuple[int, int]],
        voucher_code: Optional[str] = None,
    ) -> DiscountCalculationResult:
        """Price preview for ``(product_id, quantity)`` pairs at catalog prices.

        Raises:
            ValidationError: on empty input or non-positive quantities
            NotFoundError: if a product id is unknown
        """
        if not items:
            raise ValidationError("At least one item is required")
        uow = create_uow(self._session_factory)
        async with uow:
            products = await uow.catalog.get_products(product_id for product_id, _ in items)
            lines = []
            for product_id, quantity in items:
                if quantity < 1:
                    raise ValidationError(f"Quantity for product {product_id} must be at least 1")
                product = products.get(product_id)
                if product is None:
                    raise NotFoundError(f"Product {product_id} not found")
                lines.append(PricedLine(product_id, quantity, product.price))
            return await self.calculate(uow, lines, voucher_code, products=products)
