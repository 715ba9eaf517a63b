"""SMS transports."""
from .http_sms_transport import HttpSmsTransport, carrier_for, is_valid_bhutan_phone_number
from .mock_sms_transport import MockSmsTransport

__all__ = [
    "HttpSmsTransport",
    "MockSmsTransport",
    "carrier_for",
    "is_valid_bhutan_phone_number",
]
