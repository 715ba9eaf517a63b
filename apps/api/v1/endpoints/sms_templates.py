"""SMS template administration endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from core.application.dtos.template_dto import (
    CreateTemplateRequest,
    PlaceholderDTO,
    PreviewTemplateRequest,
    TemplateDTO,
    TemplatePreviewDTO,
    TriggerDTO,
    UpdateTemplateRequest,
)
from core.application.services import TemplateService
from core.domain.enums import OrderSource, TriggerEvent

from apps.api.deps import get_template_service

router = APIRouter(prefix="/sms-templates", tags=["sms-templates"])


@router.post("", response_model=TemplateDTO, status_code=201)
async def create_template(
    request: CreateTemplateRequest,
    service: TemplateService = Depends(get_template_service),
) -> TemplateDTO:
    return await service.create_template(request)


@router.get("", response_model=List[TemplateDTO])
async def list_templates(
    trigger_event: Optional[TriggerEvent] = None,
    order_source: Optional[OrderSource] = None,
    is_active: Optional[bool] = None,
    service: TemplateService = Depends(get_template_service),
) -> List[TemplateDTO]:
    return await service.list_templates(trigger_event, order_source, is_active)


@router.get("/placeholders", response_model=List[PlaceholderDTO])
async def list_placeholders(
    service: TemplateService = Depends(get_template_service),
) -> List[PlaceholderDTO]:
    return service.placeholders()


@router.get("/triggers", response_model=List[TriggerDTO])
async def list_triggers(
    service: TemplateService = Depends(get_template_service),
) -> List[TriggerDTO]:
    return service.triggers()


@router.post("/preview", response_model=TemplatePreviewDTO)
async def preview_template(
    request: PreviewTemplateRequest,
    service: TemplateService = Depends(get_template_service),
) -> TemplatePreviewDTO:
    return await service.preview(request)


@router.get("/{template_id}", response_model=TemplateDTO)
async def get_template(
    template_id: int,
    service: TemplateService = Depends(get_template_service),
) -> TemplateDTO:
    return await service.get_template(template_id)


@router.patch("/{template_id}", response_model=TemplateDTO)
async def update_template(
    template_id: int,
    request: UpdateTemplateRequest,
    service: TemplateService = Depends(get_template_service),
) -> TemplateDTO:
    return await service.update_template(template_id, request)


@router.delete("/{template_id}", status_code=204)
async def delete_template(
    template_id: int,
    service: TemplateService = Depends(get_template_service),
) -> Response:
    await service.delete_template(template_id)
    return Response(status_code=204)
