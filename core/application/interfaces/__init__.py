"""Application layer interfaces."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SmsSendResult:
    """Outcome reported by an SMS transport."""
    success: bool
    provider_message: str


@dataclass(frozen=True)
class PaymentGatewayResult:
    """Outcome of a gateway initiate/confirm call."""
    success: bool
    reference: Optional[str] = None
    message: Optional[str] = None


class ISmsTransport(ABC):
    """
    Interface for SMS delivery.

    Implementations perform a single attempt. Retrying is the outbox
    worker's job, so transports must not retry internally.
    """

    @abstractmethod
    async def send(
        self,
        phone_number: str,
        message: str,
        sender_name: Optional[str] = None,
    ) -> SmsSendResult:
        """
        Send one SMS.

        Args:
            phone_number: Destination number
            message: Rendered text
            sender_name: Optional sender id override

        Returns:
            SmsSendResult; failures are reported, not raised, where possible
        """
        pass


class IPaymentGateway(ABC):
    """
    Interface for the payment gateway.

    The wire protocol is the gateway adapter's concern; the order flow only
    needs a synchronous initiate/confirm pair.
    """

    @abstractmethod
    async def initiate(self, order_number: str, amount, payment_method: str) -> PaymentGatewayResult:
        """Start a payment for an order."""
        pass

    @abstractmethod
    async def confirm(self, reference: str) -> PaymentGatewayResult:
        """Confirm a previously initiated payment."""
        pass


__all__ = [
    "IPaymentGateway",
    "ISmsTransport",
    "PaymentGatewayResult",
    "SmsSendResult",
]
