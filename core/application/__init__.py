"""Application layer - services, interfaces, and DTOs."""

from .dtos import CreateOrderRequest, OrderDTO, OrderItemDTO, OrderListDTO
from .interfaces import IPaymentGateway, ISmsTransport, PaymentGatewayResult, SmsSendResult
from .services import OrderApplicationService, PaymentService, TemplateService

__all__ = [
    # DTOs
    "CreateOrderRequest",
    "OrderDTO",
    "OrderItemDTO",
    "OrderListDTO",
    # Services
    "OrderApplicationService",
    "PaymentService",
    "TemplateService",
    # Interfaces
    "IPaymentGateway",
    "ISmsTransport",
    "PaymentGatewayResult",
    "SmsSendResult",
]
