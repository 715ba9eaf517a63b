"""Repository interfaces for ledger postings and affiliate commissions."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..entities import Affiliate, AffiliateCommission, LedgerEntry
from ..enums import LedgerEntryKind


class LedgerRepository(ABC):

    @abstractmethod
    async def has_entries(self, order_id: int, kind: LedgerEntryKind) -> bool:
        pass

    @abstractmethod
    async def add_entries(self, entries: Sequence[LedgerEntry]) -> None:
        pass

    @abstractmethod
    async def list_for_order(self, order_id: int) -> List[LedgerEntry]:
        pass


class AffiliateRepository(ABC):

    @abstractmethod
    async def find_active_by_voucher(self, voucher_code: str) -> Optional[Affiliate]:
        pass

    @abstractmethod
    async def get_commission(self, order_id: int) -> Optional[AffiliateCommission]:
        pass

    @abstractmethod
    async def save_commission(self, commission: AffiliateCommission) -> AffiliateCommission:
        """Insert, or update the existing row for the same order."""
        pass
