"""DTOs for SMS template administration."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.domain.enums import OrderSource, TriggerEvent


class CreateTemplateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    trigger_event: TriggerEvent
    message: str = Field(..., min_length=1, description="Text with {{placeholder}} tokens")
    order_source: Optional[OrderSource] = Field(None, description="None applies to every source")
    is_active: bool = True
    send_count: int = Field(default=1, ge=1, le=5)
    send_delay: int = Field(default=0, ge=0, description="Minutes between sends")
    priority: int = 0

    model_config = {"frozen": True}


class UpdateTemplateRequest(BaseModel):
    """Partial update; unset fields keep their value."""

    name: Optional[str] = Field(None, min_length=1)
    trigger_event: Optional[TriggerEvent] = None
    message: Optional[str] = Field(None, min_length=1)
    order_source: Optional[OrderSource] = None
    is_active: Optional[bool] = None
    send_count: Optional[int] = Field(None, ge=1, le=5)
    send_delay: Optional[int] = Field(None, ge=0)
    priority: Optional[int] = None

    model_config = {"frozen": True}


class TemplateDTO(BaseModel):
    id: int
    name: str
    trigger_event: TriggerEvent
    message: str
    order_source: Optional[OrderSource] = None
    is_active: bool
    send_count: int
    send_delay: int
    priority: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}


class PreviewTemplateRequest(BaseModel):
    message: str = Field(..., min_length=1)
    order_id: int
    additional: Dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}


class TemplatePreviewDTO(BaseModel):
    rendered: str
    length: int
    placeholders: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class PlaceholderDTO(BaseModel):
    name: str
    description: str

    model_config = {"frozen": True}


class TriggerDTO(BaseModel):
    event: TriggerEvent
    description: str

    model_config = {"frozen": True}
