"""
Payment gateway flow.

Gateway calls happen before any order transaction is opened; only the
outcome is fed into the order state machine.
"""
import logging

from core.application.dtos.order_dto import OrderDTO
from core.application.interfaces import IPaymentGateway, PaymentGatewayResult
from core.domain.commands import UpdatePaymentCommand
from core.domain.enums import FulfillmentStatus, PaymentMethod, PaymentStatus
from core.domain.exceptions import ConflictError, ValidationError

from .order_service import OrderApplicationService

logger = logging.getLogger(__name__)


class PaymentService:

    def __init__(self, gateway: IPaymentGateway, orders: OrderApplicationService) -> None:
        self._gateway = gateway
        self._orders = orders

    async def initiate(self, order_id: int, payment_method: PaymentMethod) -> PaymentGatewayResult:
        """Start a gateway payment for a pending, non-canceled order.

        Raises:
            NotFoundError: unknown order
            ConflictError: order already paid
            ValidationError: order canceled or its payment failed
        """
        order = await self._orders.get_order(order_id)
        if order.payment_status == PaymentStatus.PAID:
            raise ConflictError(f"Order {order.order_number} is already paid")
        if (
            order.fulfillment_status == FulfillmentStatus.CANCELED
            or order.payment_status == PaymentStatus.FAILED
        ):
            raise ValidationError(f"Order {order.order_number} can no longer be paid")

        result = await self._gateway.initiate(
            order.order_number, order.total_payable, payment_method.value
        )
        logger.info(
            f"[Payment] Initiated {payment_method.value} payment for order {order.order_number}: "
            f"success={result.success}, reference={result.reference}"
        )
        return result

    async def confirm_payment(
        self,
        order_id: int,
        reference: str,
        payment_method: PaymentMethod,
    ) -> OrderDTO:
        """Confirm with the gateway, then mark the order PAID or cancel it.

        Raises:
            NotFoundError: unknown order
            TransientExternalError: gateway unreachable; the order is untouched
        """
        order = await self._orders.get_order(order_id)
        result = await self._gateway.confirm(reference)

        if result.success:
            logger.info(f"✅ [Payment] Gateway confirmed {reference} for order {order.order_number}")
            return await self._orders.update_payment_status(
                UpdatePaymentCommand(
                    order_id=order_id,
                    status=PaymentStatus.PAID,
                    payment_method=payment_method,
                )
            )

        logger.warning(
            f"[Payment] Gateway declined {reference} for order {order.order_number}: {result.message}"
        )
        return await self._orders.update_payment_status(
            UpdatePaymentCommand(
                order_id=order_id,
                status=PaymentStatus.FAILED,
                reason=result.message or "Payment declined by gateway",
            )
        )
