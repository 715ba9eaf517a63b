"""
HTTP SMS transport.

Posts a JSON body to the configured SMS gateway. One attempt per call;
failures are returned as ``SmsSendResult(success=False)`` so the outbox
worker can decide on retries.
"""
import asyncio
import logging
import re
from typing import Optional

import aiohttp

from core.application.interfaces import ISmsTransport, SmsSendResult
from core.settings.modules.sms_settings import SmsSettings

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_MOBILE_PREFIXES = ("17", "77")
COUNTRY_CODE = "975"


def local_number(phone_number: str) -> Optional[str]:
    """8-digit Bhutanese mobile number, or None if ``phone_number`` is not one.

    Accepts local numbers (17xxxxxx, 77xxxxxx) and the 975-prefixed form;
    separators are ignored.
    """
    digits = _NON_DIGITS.sub("", phone_number or "")
    if len(digits) == 11 and digits.startswith(COUNTRY_CODE):
        digits = digits[len(COUNTRY_CODE):]
    if len(digits) == 8 and digits[:2] in _MOBILE_PREFIXES:
        return digits
    return None


def is_valid_bhutan_phone_number(phone_number: str) -> bool:
    return local_number(phone_number) is not None


def carrier_for(number: str) -> str:
    """B-Mobile numbers start with 1; everything else goes to TashiCell."""
    return "BMOB" if number.startswith("1") else "TCELL"


class HttpSmsTransport(ISmsTransport):
    """SMS gateway client using aiohttp."""

    def __init__(self, settings: SmsSettings, session: Optional[aiohttp.ClientSession] = None):
        """
        Args:
            settings: Gateway URL, key, sender name and timeout
            session: Shared client session; a short-lived one is opened per
                send when omitted
        """
        self.settings = settings
        self._session = session
        if not settings.configured:
            logger.warning(
                "[SMS] SMS_URL and SMS_KEY are not configured; every send will fail"
            )

    async def send(
        self,
        phone_number: str,
        message: str,
        sender_name: Optional[str] = None,
    ) -> SmsSendResult:
        if not self.settings.configured:
            return SmsSendResult(success=False, provider_message="SMS gateway is not configured")

        number = local_number(phone_number)
        if number is None:
            logger.warning(f"[SMS] Invalid Bhutanese phone number: {phone_number}")
            return SmsSendResult(
                success=False, provider_message="Invalid Bhutanese phone number format"
            )

        payload = {
            "auth": self.settings.key,
            "carrier": carrier_for(number),
            "contact": int(number),
            "message": message,
            "senderName": sender_name or self.settings.sender_name,
        }

        try:
            if self._session is not None:
                return await self._post(self._session, number, payload)
            async with aiohttp.ClientSession() as session:
                return await self._post(session, number, payload)
        except asyncio.TimeoutError:
            logger.error(f"[SMS] Request to SMS gateway timed out for {number}")
            return SmsSendResult(success=False, provider_message="SMS service request timed out")
        except aiohttp.ClientError as e:
            logger.error(f"[SMS] Failed to reach SMS gateway for {number}: {e}")
            return SmsSendResult(
                success=False,
                provider_message=f"Unable to connect to SMS service: {type(e).__name__}",
            )

    async def _post(self, session: aiohttp.ClientSession, number: str, payload: dict) -> SmsSendResult:
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
        async with session.post(self.settings.url, json=payload, timeout=timeout) as response:
            if response.status != 200:
                error_text = await response.text()
                logger.error(f"[SMS] Gateway error for {number}: {response.status} - {error_text}")
                return SmsSendResult(
                    success=False,
                    provider_message=f"SMS API error: {response.status} - {error_text[:200]}",
                )
            try:
                body = await response.json(content_type=None)
            except ValueError:
                body = None
            provider_message = "SMS sent successfully"
            if isinstance(body, dict) and body.get("message"):
                provider_message = str(body["message"])
            logger.info(f"✅ [SMS] Sent to {number} ({payload['carrier']}): {provider_message}")
            return SmsSendResult(success=True, provider_message=provider_message)
