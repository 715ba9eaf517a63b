"""SQLAlchemy implementations of LedgerRepository and AffiliateRepository."""

from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import Affiliate, AffiliateCommission, LedgerEntry
from core.domain.enums import LedgerEntryKind
from core.domain.repositories import AffiliateRepository, LedgerRepository

from ..mappers import AccountingMapper
from ..models import AffiliateCommissionModel, AffiliateModel, LedgerEntryModel


class SqlAlchemyLedgerRepository(LedgerRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def has_entries(self, order_id: int, kind: LedgerEntryKind) -> bool:
        result = await self._session.execute(
            select(LedgerEntryModel.id)
            .where(LedgerEntryModel.order_id == order_id, LedgerEntryModel.kind == kind.value)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def add_entries(self, entries: Sequence[LedgerEntry]) -> None:
        self._session.add_all([AccountingMapper.ledger_to_persistence(e) for e in entries])
        await self._session.flush()

    async def list_for_order(self, order_id: int) -> List[LedgerEntry]:
        result = await self._session.execute(
            select(LedgerEntryModel)
            .where(LedgerEntryModel.order_id == order_id)
            .order_by(LedgerEntryModel.id)
        )
        return [AccountingMapper.ledger_to_domain(m) for m in result.scalars().all()]


class SqlAlchemyAffiliateRepository(AffiliateRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_active_by_voucher(self, voucher_code: str) -> Optional[Affiliate]:
        result = await self._session.execute(
            select(AffiliateModel).where(
                func.upper(AffiliateModel.voucher_code) == voucher_code.strip().upper(),
                AffiliateModel.is_active.is_(True),
            )
        )
        model = result.scalar_one_or_none()
        return AccountingMapper.affiliate_to_domain(model) if model else None

    async def get_commission(self, order_id: int) -> Optional[AffiliateCommission]:
        model = await self._get_commission_model(order_id)
        return AccountingMapper.commission_to_domain(model) if model else None

    async def save_commission(self, commission: AffiliateCommission) -> AffiliateCommission:
        model = await self._get_commission_model(commission.order_id)
        if model is None:
            model = AffiliateCommissionModel()
            self._session.add(model)
        AccountingMapper.update_commission(commission, model)
        await self._session.flush()
        return AccountingMapper.commission_to_domain(model)

    async def _get_commission_model(self, order_id: int) -> Optional[AffiliateCommissionModel]:
        result = await self._session.execute(
            select(AffiliateCommissionModel).where(AffiliateCommissionModel.order_id == order_id)
        )
        return result.scalar_one_or_none()
