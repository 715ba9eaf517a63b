"""
Outbox worker tests.

Rows are produced the way production produces them (order creation with an
active template) and delivered through MockSmsTransport. The fake clock
drives scheduling, retries and stale recovery.
"""
from datetime import timedelta
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from core.application.interfaces import ISmsTransport, SmsSendResult
from core.data.models import Base
from core.data.uow import create_uow
from core.domain.commands import CreateOrderCommand, CustomerInput, OrderLineInput
from core.domain.entities import OutboxEntry
from core.domain.enums import FulfillmentType, OutboxEventType, OutboxStatus, TriggerEvent
from core.infrastructure.adapters.sms import MockSmsTransport
from core.infrastructure.database import build_session_factory
from core.infrastructure.outbox import OutboxWorker


class ExplodingTransport(ISmsTransport):

    async def send(self, phone_number: str, message: str, sender_name: Optional[str] = None) -> SmsSendResult:
        raise RuntimeError("socket closed")


@pytest.fixture
def transport():
    return MockSmsTransport(fail_numbers=["17000000"])


@pytest.fixture
def worker(session_factory, transport, app_settings, clock):
    return OutboxWorker(session_factory, transport, app_settings.outbox, clock=clock)


async def order_with_sms(order_service, catalog, make_template, phone="17123456", **template):
    await make_template(TriggerEvent.ORDER_PLACED, **template)
    return await order_service.create_order(
        CreateOrderCommand(
            customer=CustomerInput(name="Pema", phone=phone),
            items=(OrderLineInput(catalog["apple"], 1),),
            fulfillment_type=FulfillmentType.PICKUP,
        )
    )


async def rows_for(session_factory, order_id):
    uow = create_uow(session_factory)
    async with uow:
        return await uow.outbox.list_for_order(order_id)


async def add_raw_entry(session_factory, clock, **fields) -> OutboxEntry:
    uow = create_uow(session_factory)
    async with uow:
        [entry] = await uow.outbox.add_many(
            [OutboxEntry(id=None, scheduled_for=clock.now, **fields)]
        )
        await uow.commit()
    return entry


@pytest.mark.asyncio
async def test_due_rows_are_sent_once(worker, transport, order_service, session_factory, catalog, make_template):
    order = await order_with_sms(order_service, catalog, make_template)

    first = await worker.run_once()
    second = await worker.run_once()

    assert (first.claimed, first.completed) == (1, 1)
    assert second.claimed == 0
    assert transport.sent == [("17123456", f"Hi Pema, order {order.order_number} update", None)]
    [row] = await rows_for(session_factory, order.id)
    assert row.status == OutboxStatus.COMPLETED


@pytest.mark.asyncio
async def test_rows_wait_until_scheduled(
    worker, transport, order_service, session_factory, catalog, make_template, clock
):
    await order_with_sms(order_service, catalog, make_template, send_count=2, send_delay=10)

    assert (await worker.run_once()).claimed == 0

    clock.advance(minutes=10)
    assert (await worker.run_once()).completed == 1

    clock.advance(minutes=10)
    assert (await worker.run_once()).completed == 1
    assert len(transport.sent) == 2


@pytest.mark.asyncio
async def test_failures_back_off_then_fail_terminally(
    worker, transport, order_service, session_factory, catalog, make_template, clock
):
    order = await order_with_sms(order_service, catalog, make_template, phone="17000000")

    stats = await worker.run_once()
    [row] = await rows_for(session_factory, order.id)
    assert stats.retried == 1
    assert row.status == OutboxStatus.PENDING
    assert row.retry_count == 1
    assert row.scheduled_for == clock.now + timedelta(seconds=60)
    assert row.error_message == "Mock delivery failure"

    assert (await worker.run_once()).claimed == 0

    clock.advance(seconds=60)
    assert (await worker.run_once()).retried == 1
    [row] = await rows_for(session_factory, order.id)
    assert row.retry_count == 2
    assert row.scheduled_for == clock.now + timedelta(seconds=120)

    clock.advance(seconds=120)
    assert (await worker.run_once()).retried == 1
    [row] = await rows_for(session_factory, order.id)
    assert row.retry_count == 3
    assert row.scheduled_for == clock.now + timedelta(seconds=180)

    # Initial attempt plus max_retries retries, then the row is parked.
    clock.advance(seconds=180)
    assert (await worker.run_once()).failed == 1
    [row] = await rows_for(session_factory, order.id)
    assert row.status == OutboxStatus.FAILED
    assert row.retry_count == 3
    assert transport.attempts == 4

    clock.advance(hours=1)
    assert (await worker.run_once()).claimed == 0
    assert transport.attempts == 4


@pytest.mark.asyncio
async def test_transport_exceptions_are_retried(
    session_factory, app_settings, clock, order_service, catalog, make_template
):
    order = await order_with_sms(order_service, catalog, make_template)
    worker = OutboxWorker(session_factory, ExplodingTransport(), app_settings.outbox, clock=clock)

    stats = await worker.run_once()

    [row] = await rows_for(session_factory, order.id)
    assert stats.retried == 1
    assert row.status == OutboxStatus.PENDING
    assert row.error_message == "RuntimeError: socket closed"


@pytest.mark.asyncio
async def test_bad_payload_fails_without_retry(worker, session_factory, clock):
    missing_phone = await add_raw_entry(
        session_factory, clock, event_type=OutboxEventType.SEND_SMS, payload={"message": "hi"}
    )
    unsupported = await add_raw_entry(
        session_factory, clock, event_type=OutboxEventType.WEBHOOK, payload={"url": "https://x"}
    )

    stats = await worker.run_once()

    assert stats.failed == 2
    uow = create_uow(session_factory)
    async with uow:
        for entry_id in (missing_phone.id, unsupported.id):
            row = await uow.outbox.get(entry_id)
            assert row.status == OutboxStatus.FAILED
            assert row.retry_count == 0


@pytest.mark.asyncio
async def test_stale_processing_rows_are_recovered(
    worker, transport, order_service, session_factory, catalog, make_template, clock
):
    order = await order_with_sms(order_service, catalog, make_template)

    # A worker claimed the row and died before recording an outcome.
    uow = create_uow(session_factory)
    async with uow:
        assert len(await uow.outbox.claim_due(clock.now, 10)) == 1
        await uow.commit()

    stats = await worker.run_once()
    assert (stats.recovered, stats.claimed) == (0, 0)

    clock.advance(seconds=601)
    stats = await worker.run_once()

    assert (stats.recovered, stats.claimed, stats.completed) == (1, 1, 1)
    [row] = await rows_for(session_factory, order.id)
    assert row.status == OutboxStatus.COMPLETED
    assert len(transport.sent) == 1


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """Separate connection per session, so two workers really compete."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'outbox.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.mark.asyncio
async def test_row_picked_by_two_workers_is_claimed_once(
    file_session_factory, transport, app_settings, clock, monkeypatch
):
    entry = await add_raw_entry(
        file_session_factory,
        clock,
        event_type=OutboxEventType.SEND_SMS,
        payload={"phoneNumber": "17123456", "message": "Your order is on its way"},
    )
    rival = OutboxWorker(file_session_factory, transport, app_settings.outbox, clock=clock)
    rival_runs = []

    uow = create_uow(file_session_factory)
    async with uow:
        select_candidates = uow.session.execute

        async def execute(statement, *args, **kwargs):
            result = await select_candidates(statement, *args, **kwargs)
            # The rival finishes its whole cycle after we saw the row as PENDING.
            if not rival_runs:
                rival_runs.append(await rival.run_once())
            return result

        monkeypatch.setattr(uow.session, "execute", execute)
        claimed = await uow.outbox.claim_due(clock.now, 10)
        await uow.commit()

    assert claimed == []
    assert (rival_runs[0].claimed, rival_runs[0].completed) == (1, 1)
    assert transport.sent == [("17123456", "Your order is on its way", None)]

    uow = create_uow(file_session_factory)
    async with uow:
        row = await uow.outbox.get(entry.id)
    assert row.status == OutboxStatus.COMPLETED
    assert (await rival.run_once()).claimed == 0
