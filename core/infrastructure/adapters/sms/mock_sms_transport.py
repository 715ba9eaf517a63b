"""
Mock SMS transport.

Records messages instead of sending them. Used in development when no
gateway is configured, and in tests.
"""
import logging
from typing import List, Optional, Tuple

from core.application.interfaces import ISmsTransport, SmsSendResult

logger = logging.getLogger(__name__)


class MockSmsTransport(ISmsTransport):
    """
    Mock implementation of the SMS transport.

    ``fail_numbers`` always fail, which lets tests drive the retry path.
    """

    def __init__(self, fail_numbers: Optional[List[str]] = None):
        self.sent: List[Tuple[str, str, Optional[str]]] = []
        self.attempts = 0
        self.fail_numbers = set(fail_numbers or [])
        logger.info("MockSmsTransport initialized")

    async def send(
        self,
        phone_number: str,
        message: str,
        sender_name: Optional[str] = None,
    ) -> SmsSendResult:
        self.attempts += 1
        if phone_number in self.fail_numbers:
            logger.info(f"[MOCK] SMS to {phone_number} failed")
            return SmsSendResult(success=False, provider_message="Mock delivery failure")

        self.sent.append((phone_number, message, sender_name))
        logger.info(f"[MOCK] SMS to {phone_number}: {message}")
        return SmsSendResult(success=True, provider_message="Mock SMS accepted")
