"""
Outbox worker.

Polls the outbox table and delivers due rows. Each cycle:

1. Return PROCESSING rows abandoned by a crashed worker to PENDING
2. Claim a batch of due PENDING rows (PENDING -> PROCESSING) and commit
3. Deliver every claimed row with no transaction open
4. Record each outcome in its own short transaction

A row can be delivered twice if a worker dies between steps 3 and 4;
it is never lost.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import ISmsTransport
from core.data.uow import create_uow
from core.domain.entities import OutboxEntry
from core.domain.enums import OutboxEventType
from core.settings.modules.outbox_settings import OutboxSettings
from core.utils.datetime import utc_now

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 1000


class PermanentDeliveryError(Exception):
    """The row can never be delivered; retrying is pointless."""


@dataclass
class OutboxRunStats:
    recovered: int = 0
    claimed: int = 0
    completed: int = 0
    retried: int = 0
    failed: int = 0


class OutboxWorker:
    """
    Single-consumer polling loop over the outbox table.

    Safe to run as several instances: claiming is a conditional UPDATE,
    so a row is only delivered by the worker that flipped it.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        transport: ISmsTransport,
        settings: OutboxSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._transport = transport
        self._settings = settings
        self._clock = clock

    async def run_once(self) -> OutboxRunStats:
        """Run one poll cycle and return what happened."""
        stats = OutboxRunStats()
        now = self._clock()

        uow = create_uow(self._session_factory)
        async with uow:
            stale_before = now - timedelta(seconds=self._settings.processing_timeout_seconds)
            stats.recovered = await uow.outbox.recover_stale(stale_before, now)
            entries = await uow.outbox.claim_due(now, self._settings.batch_size)
            await uow.commit()

        stats.claimed = len(entries)
        if stats.recovered:
            logger.warning(f"[Outbox Worker] Recovered {stats.recovered} stale PROCESSING row(s)")
        if not entries:
            return stats

        logger.info(f"[Outbox Worker] Claimed {len(entries)} row(s)")
        for entry in entries:
            await self._process(entry, stats)

        logger.info(
            f"[Outbox Worker] Cycle done: {stats.completed} sent, {stats.retried} rescheduled, "
            f"{stats.failed} failed"
        )
        return stats

    async def run_forever(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Poll until ``stop_event`` is set. A failing cycle is logged, not fatal."""
        stop_event = stop_event or asyncio.Event()
        logger.info(
            f"🚀 [Outbox Worker] Started (interval {self._settings.poll_interval_seconds}s, "
            f"batch {self._settings.batch_size})"
        )
        while not stop_event.is_set():
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"❌ [Outbox Worker] Poll cycle failed: {e}", exc_info=True)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._settings.poll_interval_seconds)
            except asyncio.TimeoutError:
                pass
        logger.info("[Outbox Worker] Stopped")

    async def _process(self, entry: OutboxEntry, stats: OutboxRunStats) -> None:
        try:
            success, message = await self._deliver(entry)
            permanent = False
        except PermanentDeliveryError as e:
            success, message, permanent = False, str(e), True
        except Exception as e:
            success, message, permanent = False, f"{type(e).__name__}: {e}", False
            logger.error(
                f"[Outbox Worker] Transport raised for row {entry.id}: {message}", exc_info=True
            )

        now = self._clock()
        failures = entry.retry_count + 1
        uow = create_uow(self._session_factory)
        async with uow:
            if success:
                await uow.outbox.mark_completed(entry.id, now)
                stats.completed += 1
            elif permanent or entry.retry_count >= self._settings.max_retries:
                await uow.outbox.mark_failed(
                    entry.id, entry.retry_count, message[:MAX_ERROR_LENGTH], now
                )
                stats.failed += 1
                logger.error(
                    f"❌ [Outbox Worker] Row {entry.id} (order {entry.order_id}) FAILED after "
                    f"{failures} attempt(s): {message}"
                )
            else:
                delay = timedelta(seconds=self._settings.retry_base_delay_seconds * failures)
                await uow.outbox.reschedule(
                    entry.id, failures, now + delay, message[:MAX_ERROR_LENGTH], now
                )
                stats.retried += 1
                logger.warning(
                    f"[Outbox Worker] Row {entry.id} attempt {failures} failed, retrying in "
                    f"{delay.total_seconds():.0f}s: {message}"
                )
            await uow.commit()

    async def _deliver(self, entry: OutboxEntry) -> Tuple[bool, str]:
        if entry.event_type != OutboxEventType.SEND_SMS:
            raise PermanentDeliveryError(f"Unsupported event type {entry.event_type.value}")

        phone = entry.payload.get("phoneNumber")
        message = entry.payload.get("message")
        if not phone or not message:
            raise PermanentDeliveryError("Payload requires phoneNumber and message")

        result = await self._transport.send(phone, message)
        return result.success, result.provider_message
