"""Repository interfaces for SMS templates and the outbox."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from ..entities import NotificationTemplate, OutboxEntry
from ..enums import OrderSource, TriggerEvent


class TemplateRepository(ABC):

    @abstractmethod
    async def add(self, template: NotificationTemplate) -> NotificationTemplate:
        pass

    @abstractmethod
    async def save(self, template: NotificationTemplate) -> NotificationTemplate:
        pass

    @abstractmethod
    async def get(self, template_id: int) -> Optional[NotificationTemplate]:
        pass

    @abstractmethod
    async def delete(self, template_id: int) -> bool:
        pass

    @abstractmethod
    async def list(
        self,
        trigger_event: Optional[TriggerEvent] = None,
        order_source: Optional[OrderSource] = None,
        is_active: Optional[bool] = None,
    ) -> List[NotificationTemplate]:
        pass

    @abstractmethod
    async def find_active(
        self, trigger_event: TriggerEvent, order_source: Optional[OrderSource]
    ) -> List[NotificationTemplate]:
        """Active templates for the event matching ``order_source`` or the
        wildcard (NULL) source, by priority then creation time."""
        pass


class OutboxRepository(ABC):

    @abstractmethod
    async def add_many(self, entries: Sequence[OutboxEntry]) -> List[OutboxEntry]:
        pass

    @abstractmethod
    async def get(self, entry_id: int) -> Optional[OutboxEntry]:
        pass

    @abstractmethod
    async def claim_due(self, now: datetime, limit: int) -> List[OutboxEntry]:
        """Atomically move up to ``limit`` due PENDING rows to PROCESSING.

        Only rows this call actually flipped are returned, so two workers
        never claim the same row.
        """
        pass

    @abstractmethod
    async def mark_completed(self, entry_id: int, now: datetime) -> None:
        pass

    @abstractmethod
    async def reschedule(
        self, entry_id: int, retry_count: int, scheduled_for: datetime, error: str, now: datetime
    ) -> None:
        """Back to PENDING for another attempt."""
        pass

    @abstractmethod
    async def mark_failed(self, entry_id: int, retry_count: int, error: str, now: datetime) -> None:
        pass

    @abstractmethod
    async def recover_stale(self, stale_before: datetime, now: datetime) -> int:
        """Return PROCESSING rows untouched since ``stale_before`` to PENDING."""
        pass

    @abstractmethod
    async def list_for_order(self, order_id: int) -> List[OutboxEntry]:
        pass
