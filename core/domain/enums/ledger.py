"""Ledger entry kinds."""
from enum import Enum


class LedgerEntryKind(str, Enum):
    """Why a ledger pair was posted."""

    PAYMENT = "PAYMENT"
    REVERSAL = "REVERSAL"
