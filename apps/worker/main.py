"""Outbox worker entry point.

Usage:
    python -m apps.worker.main
"""

import asyncio
import logging
import signal

from core.application.interfaces import ISmsTransport
from core.infrastructure.adapters.sms import HttpSmsTransport, MockSmsTransport
from core.infrastructure.database import close_database, get_session_factory, init_database
from core.infrastructure.logging import configure_logging
from core.infrastructure.outbox import OutboxWorker
from core.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


def build_transport(settings: AppSettings) -> ISmsTransport:
    if settings.sms.configured:
        return HttpSmsTransport(settings.sms)
    logger.warning("SMS_URL/SMS_KEY not set, messages will only be logged")
    return MockSmsTransport()


async def main() -> None:
    configure_logging()
    settings = get_app_settings()
    await init_database(settings.database)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers
            pass

    worker = OutboxWorker(get_session_factory(), build_transport(settings), settings.outbox)
    try:
        await worker.run_forever(stop_event)
    finally:
        await close_database()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
