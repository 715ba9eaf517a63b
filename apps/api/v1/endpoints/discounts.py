"""Discount preview endpoint."""

from fastapi import APIRouter, Depends

from core.application.dtos.discount_dto import DiscountCalculationDTO, DiscountPreviewRequest
from core.application.services import OrderApplicationService

from apps.api.deps import get_order_service

router = APIRouter(prefix="/discounts", tags=["discounts"])


@router.post("/calculate", response_model=DiscountCalculationDTO)
async def calculate_order_discounts(
    request: DiscountPreviewRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> DiscountCalculationDTO:
    """Price preview at current catalog prices. Usage counters are not touched."""
    return await service.calculate_order_discounts(
        [(item.product_id, item.quantity) for item in request.items],
        request.voucher_code,
    )
