"""Application DTOs."""

from .discount_dto import DiscountCalculationDTO, DiscountPreviewRequest
from .order_dto import (
    CancelOrderRequest,
    ConfirmPaymentRequest,
    CreateOrderRequest,
    OrderDTO,
    OrderItemDTO,
    OrderListDTO,
    UpdateFulfillmentRequest,
    UpdateOrderRequest,
    UpdatePaymentRequest,
)
from .template_dto import (
    CreateTemplateRequest,
    PreviewTemplateRequest,
    TemplateDTO,
    TemplatePreviewDTO,
    UpdateTemplateRequest,
)

__all__ = [
    "CancelOrderRequest",
    "ConfirmPaymentRequest",
    "CreateOrderRequest",
    "CreateTemplateRequest",
    "DiscountCalculationDTO",
    "DiscountPreviewRequest",
    "OrderDTO",
    "OrderItemDTO",
    "OrderListDTO",
    "PreviewTemplateRequest",
    "TemplateDTO",
    "TemplatePreviewDTO",
    "UpdateFulfillmentRequest",
    "UpdateOrderRequest",
    "UpdatePaymentRequest",
    "UpdateTemplateRequest",
]
