"""Ledger entries, affiliates and commissions."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..enums import LedgerEntryKind, PaymentStatus


@dataclass(frozen=True)
class LedgerEntry:
    """One side of a balanced posting. Exactly one of debit/credit is non-zero."""
    account_code: str
    order_id: int
    kind: LedgerEntryKind
    debit: Decimal
    credit: Decimal
    entry_date: datetime
    description: str
    reference_number: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class Affiliate:
    id: int
    name: str
    voucher_code: str
    commission_percentage: Decimal
    is_active: bool = True


@dataclass(frozen=True)
class AffiliateCommission:
    """At most one per order."""
    affiliate_id: int
    order_id: int
    order_total: Decimal
    commission_percentage: Decimal
    commission_amount: Decimal
    order_date: datetime
    payment_status: PaymentStatus
    id: Optional[int] = None
