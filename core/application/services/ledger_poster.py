"""
Ledger poster.

Posts the balanced pair for a paid order (debit cash/bank, credit revenue)
and its mirror on cancellation. Both run inside the caller's unit of work
so they commit or roll back with the order change that caused them.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from core.data.uow import UnitOfWork
from core.domain.entities import LedgerEntry, Order
from core.domain.enums import LedgerEntryKind
from core.domain.exceptions import ConflictError
from core.settings.modules.accounting_settings import AccountingSettings

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class LedgerPoster:
    """Idempotent per order: a second posting of the same kind is skipped."""

    def __init__(self, settings: AccountingSettings) -> None:
        self._settings = settings

    async def post_payment(self, uow: UnitOfWork, order: Order, now: datetime) -> bool:
        """Post debit cash/bank and credit revenue for ``total_payable``.

        Returns:
            True if entries were written, False if they already existed

        Raises:
            ConflictError: if the order has no receipt number yet
        """
        if not order.is_receipted:
            raise ConflictError(
                f"Order {order.order_number} has no receipt; cannot post payment"
            )
        if await uow.ledger.has_entries(order.id, LedgerEntryKind.PAYMENT):
            logger.info(
                f"[Ledger] Entries already exist for order {order.order_number}, skipping"
            )
            return False

        method = order.payment_method.value if order.payment_method else None
        debit_account = self._settings.account_for(method)
        entry_date = order.paid_at or now
        amount = order.total_payable

        await uow.ledger.add_entries(
            [
                LedgerEntry(
                    account_code=debit_account,
                    order_id=order.id,
                    kind=LedgerEntryKind.PAYMENT,
                    debit=amount,
                    credit=ZERO,
                    entry_date=entry_date,
                    description=f"Payment received for Order {order.order_number}",
                    reference_number=order.receipt_number,
                ),
                LedgerEntry(
                    account_code=self._settings.revenue_account_code,
                    order_id=order.id,
                    kind=LedgerEntryKind.PAYMENT,
                    debit=ZERO,
                    credit=amount,
                    entry_date=entry_date,
                    description=f"Sales revenue from Order {order.order_number}",
                    reference_number=order.receipt_number,
                ),
            ]
        )
        logger.info(
            f"✅ [Ledger] Posted {amount} for order {order.order_number} "
            f"({debit_account} / {self._settings.revenue_account_code})"
        )
        return True

    async def post_reversal(
        self,
        uow: UnitOfWork,
        order: Order,
        now: datetime,
        reason: Optional[str] = None,
    ) -> bool:
        """Mirror the payment pair of a receipted order.

        Returns:
            True if a reversal was written; False when there is nothing to
            reverse or the reversal already exists
        """
        if not order.is_receipted:
            return False
        if await uow.ledger.has_entries(order.id, LedgerEntryKind.REVERSAL):
            logger.info(f"[Ledger] Reversal already posted for order {order.order_number}")
            return False

        payments = [
            entry
            for entry in await uow.ledger.list_for_order(order.id)
            if entry.kind == LedgerEntryKind.PAYMENT
        ]
        if not payments:
            logger.warning(
                f"[Ledger] Order {order.order_number} is receipted but has no payment entries"
            )
            return False

        description = f"Refund issued for Order {order.order_number}"
        if reason:
            description = f"{description}: {reason}"
        await uow.ledger.add_entries(
            [
                LedgerEntry(
                    account_code=entry.account_code,
                    order_id=order.id,
                    kind=LedgerEntryKind.REVERSAL,
                    debit=entry.credit,
                    credit=entry.debit,
                    entry_date=now,
                    description=description,
                    reference_number=f"REV-{order.receipt_number}",
                )
                for entry in payments
            ]
        )
        logger.info(f"✅ [Ledger] Reversal posted for order {order.order_number}")
        return True
