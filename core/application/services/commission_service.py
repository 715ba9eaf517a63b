"""
Affiliate commission accrual.

Commission is a percentage of the pre-discount order value (items at
list price plus delivery). One row per order: re-accrual updates it.
"""
import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from core.data.uow import UnitOfWork
from core.domain.entities import AffiliateCommission, Order, normalize_voucher
from core.domain.value_objects import quantize_money

logger = logging.getLogger(__name__)


class CommissionAccrual:

    async def accrue(
        self,
        uow: UnitOfWork,
        order: Order,
        now: datetime,
    ) -> Order:
        """Link the order to the voucher's affiliate and upsert its commission.

        Returns:
            The order with ``affiliate_id`` set (or cleared when the voucher
            does not belong to an active affiliate). Not persisted here.
        """
        voucher = normalize_voucher(order.voucher_code)
        if voucher is None:
            return replace(order, affiliate_id=None) if order.affiliate_id else order

        affiliate = await uow.affiliates.find_active_by_voucher(voucher)
        if affiliate is None:
            return replace(order, affiliate_id=None) if order.affiliate_id else order

        order = replace(order, affiliate_id=affiliate.id)
        percentage = affiliate.commission_percentage
        if percentage <= 0:
            return order

        base = order.total_before_discount
        amount = quantize_money(base * percentage / Decimal("100"))
        existing: Optional[AffiliateCommission] = await uow.affiliates.get_commission(order.id)
        commission = AffiliateCommission(
            id=existing.id if existing else None,
            affiliate_id=affiliate.id,
            order_id=order.id,
            order_total=base,
            commission_percentage=percentage,
            commission_amount=amount,
            order_date=existing.order_date if existing else now,
            payment_status=order.payment_status,
        )
        await uow.affiliates.save_commission(commission)
        logger.info(
            f"[Affiliate Commission] {'Updated' if existing else 'Created'} commission for "
            f"affiliate {affiliate.id}: {amount} ({percentage}% of {base})"
        )
        return order
