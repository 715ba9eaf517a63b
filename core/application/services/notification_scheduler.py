"""
Notification scheduling.

Turns a trigger event into outbox rows inside the caller's transaction.
Nothing here talks to the SMS provider; delivery belongs to the outbox
worker after commit.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.data.uow import UnitOfWork
from core.domain.entities import Order, OutboxEntry
from core.domain.enums import OutboxEventType, OutboxStatus, TriggerEvent
from core.utils.datetime import utc_now

from .template_renderer import FALLBACK_MESSAGES, TemplateRenderer

logger = logging.getLogger(__name__)


class NotificationScheduler:
    """
    Resolves templates for an event and queues one outbox row per send.

    A template with ``send_count=N`` and ``send_delay=D`` yields rows at
    now+D, now+2D, ... now+N*D. Text is rendered once, here, so later
    template edits never change queued messages.
    """

    def __init__(
        self,
        renderer: TemplateRenderer,
        fallback_enabled: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._renderer = renderer
        self._fallback_enabled = fallback_enabled
        self._clock = clock

    async def plan(
        self,
        uow: UnitOfWork,
        order: Order,
        event: TriggerEvent,
        additional: Optional[Mapping[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> List[OutboxEntry]:
        """Build (but do not store) the outbox rows for ``event``."""
        now = now or self._clock()
        phone = order.customer.phone
        if not phone:
            logger.warning(
                f"[SMS Trigger] Order {order.order_number} has no customer phone, "
                f"skipping {event.value}"
            )
            return []

        templates = await uow.templates.find_active(event, order.order_source)
        entries: List[OutboxEntry] = []

        for template in templates:
            message = self._renderer.render(template.message, order, additional)
            for index in range(template.send_count):
                entries.append(
                    OutboxEntry(
                        id=None,
                        event_type=OutboxEventType.SEND_SMS,
                        order_id=order.id,
                        scheduled_for=now + timedelta(minutes=template.send_delay * (index + 1)),
                        status=OutboxStatus.PENDING,
                        payload={
                            "phoneNumber": phone,
                            "message": message,
                            "templateId": template.id,
                            "templateName": template.name,
                            "triggerEvent": event.value,
                            "sendIndex": index + 1,
                            "totalSends": template.send_count,
                        },
                    )
                )

        if not templates and self._fallback_enabled and event in FALLBACK_MESSAGES:
            logger.info(
                f"[SMS Trigger] No active template for {event.value} "
                f"({order.order_source.value}), using fallback message"
            )
            entries.append(
                OutboxEntry(
                    id=None,
                    event_type=OutboxEventType.SEND_SMS,
                    order_id=order.id,
                    scheduled_for=now,
                    status=OutboxStatus.PENDING,
                    payload={
                        "phoneNumber": phone,
                        "message": self._renderer.render(FALLBACK_MESSAGES[event], order, additional),
                        "templateId": None,
                        "templateName": f"fallback:{event.value}",
                        "triggerEvent": event.value,
                        "sendIndex": 1,
                        "totalSends": 1,
                    },
                )
            )

        return entries

    async def schedule(
        self,
        uow: UnitOfWork,
        order: Order,
        event: Optional[TriggerEvent],
        additional: Optional[Mapping[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> List[OutboxEntry]:
        """Queue outbox rows for ``event`` in the current transaction.

        Template or rendering problems are logged and produce no rows; the
        order change still commits. Storage errors propagate.
        """
        if event is None:
            return []

        try:
            entries = await self.plan(uow, order, event, additional, now)
        except SQLAlchemyError:
            raise
        except Exception as e:
            logger.error(
                f"❌ [SMS Trigger] Failed to prepare {event.value} for order "
                f"{order.order_number}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            return []

        if not entries:
            return []

        stored = await uow.outbox.add_many(entries)
        logger.info(
            f"[SMS Trigger] Queued {len(stored)} SMS for order {order.order_number} ({event.value})"
        )
        return stored
