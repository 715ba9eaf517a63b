"""
Mock payment gateway.

Accepts every payment except references listed in ``declined``.
"""
import logging
import uuid
from decimal import Decimal
from typing import Dict, Optional, Set

from core.application.interfaces import IPaymentGateway, PaymentGatewayResult

logger = logging.getLogger(__name__)


class MockPaymentGateway(IPaymentGateway):

    def __init__(self, declined: Optional[Set[str]] = None):
        self.declined = set(declined or ())
        self.initiated: Dict[str, Decimal] = {}

    async def initiate(self, order_number: str, amount, payment_method: str) -> PaymentGatewayResult:
        reference = f"{payment_method}-{uuid.uuid4().hex[:12].upper()}"
        self.initiated[reference] = Decimal(str(amount))
        logger.info(f"[MOCK] Initiated {payment_method} payment {reference} for {order_number}")
        return PaymentGatewayResult(success=True, reference=reference, message="Payment initiated")

    async def confirm(self, reference: str) -> PaymentGatewayResult:
        if reference in self.declined:
            logger.info(f"[MOCK] Payment {reference} declined")
            return PaymentGatewayResult(success=False, reference=reference, message="Payment declined")
        logger.info(f"[MOCK] Payment {reference} confirmed")
        return PaymentGatewayResult(success=True, reference=reference, message="Payment confirmed")
