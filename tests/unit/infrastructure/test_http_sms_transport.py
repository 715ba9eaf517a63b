"""
Unit tests for the HTTP SMS transport.

The aiohttp session is replaced by a MagicMock, so nothing leaves the process.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from core.infrastructure.adapters.sms import HttpSmsTransport, MockSmsTransport
from core.infrastructure.adapters.sms.http_sms_transport import (
    carrier_for,
    is_valid_bhutan_phone_number,
    local_number,
)
from core.settings.modules import SmsSettings


def make_session(status=200, body=None, text=""):
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=body)
    response.text = AsyncMock(return_value=text)
    session = MagicMock()
    session.post.return_value.__aenter__.return_value = response
    return session


@pytest.fixture
def sms_settings():
    return SmsSettings(
        url="https://sms.example.bt/send",
        key="secret",
        sender_name="Orderflow",
        timeout_seconds=5,
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("17123456", "17123456"),
        ("77-12 34 56", "77123456"),
        ("+975 17123456", "17123456"),
        ("97577123456", "77123456"),
        ("12345678", None),
        ("1712345", None),
        ("", None),
    ],
)
def test_local_number(raw, expected):
    assert local_number(raw) == expected
    assert is_valid_bhutan_phone_number(raw) is (expected is not None)


def test_carrier_follows_local_prefix():
    assert carrier_for("17123456") == "BMOB"
    assert carrier_for("77123456") == "TCELL"


@pytest.mark.asyncio
async def test_send_posts_gateway_payload(sms_settings):
    session = make_session(body={"message": "Queued"})
    transport = HttpSmsTransport(sms_settings, session=session)

    result = await transport.send("+975 77123456", "Your order is ready")

    assert result.success
    assert result.provider_message == "Queued"
    args, kwargs = session.post.call_args
    assert args == ("https://sms.example.bt/send",)
    assert kwargs["json"] == {
        "auth": "secret",
        "carrier": "TCELL",
        "contact": 77123456,
        "message": "Your order is ready",
        "senderName": "Orderflow",
    }
    assert kwargs["timeout"].total == 5


@pytest.mark.asyncio
async def test_send_without_message_in_body(sms_settings):
    transport = HttpSmsTransport(sms_settings, session=make_session(body=None))

    result = await transport.send("17123456", "hi", sender_name="Shop")

    assert result.success
    assert result.provider_message == "SMS sent successfully"


@pytest.mark.asyncio
async def test_invalid_number_is_rejected_without_request(sms_settings):
    session = make_session()
    transport = HttpSmsTransport(sms_settings, session=session)

    result = await transport.send("12345", "hi")

    assert not result.success
    assert result.provider_message == "Invalid Bhutanese phone number format"
    session.post.assert_not_called()


@pytest.mark.asyncio
async def test_non_200_is_reported(sms_settings):
    transport = HttpSmsTransport(sms_settings, session=make_session(status=502, text="Bad Gateway"))

    result = await transport.send("17123456", "hi")

    assert not result.success
    assert result.provider_message == "SMS API error: 502 - Bad Gateway"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, fragment",
    [
        (aiohttp.ClientConnectionError("refused"), "Unable to connect"),
        (asyncio.TimeoutError(), "timed out"),
    ],
)
async def test_transport_errors_become_failures(sms_settings, error, fragment):
    session = MagicMock()
    session.post.side_effect = error
    transport = HttpSmsTransport(sms_settings, session=session)

    result = await transport.send("17123456", "hi")

    assert not result.success
    assert fragment in result.provider_message


@pytest.mark.asyncio
async def test_unconfigured_gateway_fails():
    transport = HttpSmsTransport(SmsSettings(url=None, key=None), session=make_session())

    result = await transport.send("17123456", "hi")

    assert not result.success


@pytest.mark.asyncio
async def test_mock_transport_records_and_fails_listed_numbers():
    transport = MockSmsTransport(fail_numbers=["17000000"])

    ok = await transport.send("17123456", "hello")
    failed = await transport.send("17000000", "hello")

    assert ok.success and not failed.success
    assert transport.sent == [("17123456", "hello", None)]
