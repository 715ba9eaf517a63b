"""SQLAlchemy implementations of TemplateRepository and OutboxRepository."""

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import NotificationTemplate, OutboxEntry
from core.domain.enums import OrderSource, OutboxStatus, TriggerEvent
from core.domain.repositories import OutboxRepository, TemplateRepository

from ..mappers import OutboxMapper, TemplateMapper
from ..models import OutboxModel, SmsTemplateModel


class SqlAlchemyTemplateRepository(TemplateRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, template: NotificationTemplate) -> NotificationTemplate:
        model = SmsTemplateModel()
        TemplateMapper.update_persistence(template, model)
        self._session.add(model)
        await self._session.flush()
        return TemplateMapper.to_domain(model)

    async def save(self, template: NotificationTemplate) -> NotificationTemplate:
        model = await self._session.get(SmsTemplateModel, template.id)
        if model is None:
            raise ValueError(f"Template {template.id} does not exist")
        TemplateMapper.update_persistence(template, model)
        await self._session.flush()
        await self._session.refresh(model)
        return TemplateMapper.to_domain(model)

    async def get(self, template_id: int) -> Optional[NotificationTemplate]:
        model = await self._session.get(SmsTemplateModel, template_id)
        return TemplateMapper.to_domain(model) if model else None

    async def delete(self, template_id: int) -> bool:
        model = await self._session.get(SmsTemplateModel, template_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def list(
        self,
        trigger_event: Optional[TriggerEvent] = None,
        order_source: Optional[OrderSource] = None,
        is_active: Optional[bool] = None,
    ) -> List[NotificationTemplate]:
        stmt = select(SmsTemplateModel)
        if trigger_event is not None:
            stmt = stmt.where(SmsTemplateModel.trigger_event == trigger_event.value)
        if order_source is not None:
            stmt = stmt.where(SmsTemplateModel.order_source == order_source.value)
        if is_active is not None:
            stmt = stmt.where(SmsTemplateModel.is_active.is_(is_active))
        stmt = stmt.order_by(
            SmsTemplateModel.priority, SmsTemplateModel.created_at, SmsTemplateModel.id
        )
        result = await self._session.execute(stmt)
        return [TemplateMapper.to_domain(model) for model in result.scalars().all()]

    async def find_active(
        self, trigger_event: TriggerEvent, order_source: Optional[OrderSource]
    ) -> List[NotificationTemplate]:
        source_filter = SmsTemplateModel.order_source.is_(None)
        if order_source is not None:
            source_filter = or_(
                source_filter, SmsTemplateModel.order_source == order_source.value
            )
        result = await self._session.execute(
            select(SmsTemplateModel)
            .where(
                SmsTemplateModel.trigger_event == trigger_event.value,
                SmsTemplateModel.is_active.is_(True),
                source_filter,
            )
            .order_by(
                SmsTemplateModel.priority, SmsTemplateModel.created_at, SmsTemplateModel.id
            )
        )
        return [TemplateMapper.to_domain(model) for model in result.scalars().all()]


class SqlAlchemyOutboxRepository(OutboxRepository):
    """Outbox table access. State changes are conditional UPDATEs."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_many(self, entries: Sequence[OutboxEntry]) -> List[OutboxEntry]:
        models = [OutboxMapper.to_persistence(entry) for entry in entries]
        self._session.add_all(models)
        await self._session.flush()
        return [OutboxMapper.to_domain(model) for model in models]

    async def get(self, entry_id: int) -> Optional[OutboxEntry]:
        result = await self._session.execute(
            select(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return OutboxMapper.to_domain(model) if model else None

    async def claim_due(self, now: datetime, limit: int) -> List[OutboxEntry]:
        candidates = await self._session.execute(
            select(OutboxModel.id)
            .where(
                OutboxModel.status == OutboxStatus.PENDING.value,
                OutboxModel.scheduled_for <= now,
            )
            .order_by(OutboxModel.scheduled_for, OutboxModel.id)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )

        claimed_ids = []
        for entry_id in candidates.scalars().all():
            # Only the worker whose UPDATE flips PENDING -> PROCESSING owns the row.
            result = await self._session.execute(
                update(OutboxModel)
                .where(
                    OutboxModel.id == entry_id,
                    OutboxModel.status == OutboxStatus.PENDING.value,
                )
                .values(status=OutboxStatus.PROCESSING.value, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                claimed_ids.append(entry_id)

        if not claimed_ids:
            return []

        result = await self._session.execute(
            select(OutboxModel)
            .where(OutboxModel.id.in_(claimed_ids))
            .order_by(OutboxModel.scheduled_for, OutboxModel.id)
            .execution_options(populate_existing=True)
        )
        return [OutboxMapper.to_domain(model) for model in result.scalars().all()]

    async def mark_completed(self, entry_id: int, now: datetime) -> None:
        await self._transition(
            entry_id, status=OutboxStatus.COMPLETED.value, error_message=None, updated_at=now
        )

    async def reschedule(
        self, entry_id: int, retry_count: int, scheduled_for: datetime, error: str, now: datetime
    ) -> None:
        await self._transition(
            entry_id,
            status=OutboxStatus.PENDING.value,
            retry_count=retry_count,
            scheduled_for=scheduled_for,
            error_message=error,
            updated_at=now,
        )

    async def mark_failed(self, entry_id: int, retry_count: int, error: str, now: datetime) -> None:
        await self._transition(
            entry_id,
            status=OutboxStatus.FAILED.value,
            retry_count=retry_count,
            error_message=error,
            updated_at=now,
        )

    async def recover_stale(self, stale_before: datetime, now: datetime) -> int:
        result = await self._session.execute(
            update(OutboxModel)
            .where(
                OutboxModel.status == OutboxStatus.PROCESSING.value,
                OutboxModel.updated_at < stale_before,
            )
            .values(status=OutboxStatus.PENDING.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def list_for_order(self, order_id: int) -> List[OutboxEntry]:
        result = await self._session.execute(
            select(OutboxModel)
            .where(OutboxModel.order_id == order_id)
            .order_by(OutboxModel.scheduled_for, OutboxModel.id)
            .execution_options(populate_existing=True)
        )
        return [OutboxMapper.to_domain(model) for model in result.scalars().all()]

    async def _transition(self, entry_id: int, **values) -> None:
        # Outcomes are only recorded for rows this worker holds in PROCESSING.
        await self._session.execute(
            update(OutboxModel)
            .where(
                OutboxModel.id == entry_id,
                OutboxModel.status == OutboxStatus.PROCESSING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
