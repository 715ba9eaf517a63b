"""Order endpoints for REST API."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.application.dtos.order_dto import (
    CancelOrderRequest,
    ConfirmPaymentRequest,
    CreateOrderRequest,
    OrderDTO,
    UpdateFulfillmentRequest,
    UpdateOrderRequest,
    UpdatePaymentRequest,
)
from core.application.interfaces import PaymentGatewayResult
from core.application.services import OrderApplicationService, PaymentService
from core.domain.commands import (
    CancelOrderCommand,
    MarkDeliveredCommand,
    UpdateFulfillmentCommand,
    UpdateOrderCommand,
    UpdatePaymentCommand,
)
from core.domain.enums import FulfillmentStatus, PaymentMethod, PaymentStatus

from apps.api.deps import get_order_service, get_payment_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderDTO, status_code=201)
async def create_order(
    request: CreateOrderRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    """Create a new order.

    Args:
        request: CreateOrderRequest DTO
        service: OrderApplicationService instance

    Returns:
        OrderDTO with created order details
    """
    return await service.create_order(request.to_command())


@router.post("/counter", response_model=OrderDTO, status_code=201)
async def place_counter_order(
    request: CreateOrderRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    """Create a walk-in order that is paid on the spot."""
    return await service.place_counter_order(request.to_counter_command())


@router.get("", response_model=List[OrderDTO])
async def list_orders(
    limit: int = Query(default=100, ge=1, le=1000, description="Maximum number of orders"),
    offset: int = Query(default=0, ge=0),
    fulfillment_status: Optional[FulfillmentStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    service: OrderApplicationService = Depends(get_order_service),
) -> List[OrderDTO]:
    """List orders with pagination, newest first."""
    return await service.list_orders(
        limit=limit,
        offset=offset,
        fulfillment_status=fulfillment_status,
        payment_status=payment_status,
    )


@router.get("/{order_id}", response_model=OrderDTO)
async def get_order(
    order_id: int,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.get_order(order_id)


@router.patch("/{order_id}", response_model=OrderDTO)
async def update_order(
    order_id: int,
    request: UpdateOrderRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.update_order(
        UpdateOrderCommand(
            order_id=order_id,
            internal_notes=request.internal_notes,
            delivery_notes=request.delivery_notes,
            delivery_cost=request.delivery_cost,
            voucher_code=request.voucher_code,
        )
    )


@router.post("/{order_id}/fulfillment", response_model=OrderDTO)
async def update_fulfillment_status(
    order_id: int,
    request: UpdateFulfillmentRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.update_fulfillment_status(
        UpdateFulfillmentCommand(
            order_id=order_id,
            status=request.status,
            driver_name=request.driver_name,
            driver_phone=request.driver_phone,
            vehicle_number=request.vehicle_number,
        )
    )


@router.post("/{order_id}/payment", response_model=OrderDTO)
async def update_payment_status(
    order_id: int,
    request: UpdatePaymentRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.update_payment_status(
        UpdatePaymentCommand(
            order_id=order_id,
            status=request.status,
            payment_method=request.payment_method,
            reason=request.reason,
        )
    )


@router.post("/{order_id}/cancel", response_model=OrderDTO)
async def cancel_order(
    order_id: int,
    request: CancelOrderRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.cancel_order(CancelOrderCommand(order_id=order_id, reason=request.reason))


@router.post("/{order_id}/deliver", response_model=OrderDTO)
async def mark_delivered(
    order_id: int,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.mark_delivered(MarkDeliveredCommand(order_id=order_id))


@router.post("/{order_id}/payment/initiate")
async def initiate_payment(
    order_id: int,
    payment_method: PaymentMethod = Query(...),
    service: PaymentService = Depends(get_payment_service),
) -> dict:
    result: PaymentGatewayResult = await service.initiate(order_id, payment_method)
    return {"success": result.success, "reference": result.reference, "message": result.message}


@router.post("/{order_id}/payment/confirm", response_model=OrderDTO)
async def confirm_payment(
    order_id: int,
    request: ConfirmPaymentRequest,
    service: PaymentService = Depends(get_payment_service),
) -> OrderDTO:
    return await service.confirm_payment(order_id, request.reference, request.payment_method)
