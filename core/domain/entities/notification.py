"""
SMS templates and outbox entries.

CRITICAL: This file must contain ZERO imports from sqlalchemy/pydantic/fastapi.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..enums import OrderSource, OutboxEventType, OutboxStatus, TriggerEvent

MAX_SEND_COUNT = 5


@dataclass(frozen=True)
class NotificationTemplate:
    """
    Admin-configured SMS template.

    ``order_source`` None means the template applies to every order source.
    Each match produces ``send_count`` outbox rows spaced ``send_delay``
    minutes apart.
    """
    id: Optional[int]
    name: str
    trigger_event: TriggerEvent
    message: str
    order_source: Optional[OrderSource] = None
    is_active: bool = True
    send_count: int = 1
    send_delay: int = 0
    priority: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Template name is required")
        if not self.message or not self.message.strip():
            raise ValueError("Template message is required")
        if not 1 <= self.send_count <= MAX_SEND_COUNT:
            raise ValueError(f"Send count must be between 1 and {MAX_SEND_COUNT}")
        if self.send_delay < 0:
            raise ValueError("Send delay cannot be negative")


@dataclass(frozen=True)
class OutboxEntry:
    """One durable, independently retried delivery attempt group."""
    id: Optional[int]
    event_type: OutboxEventType
    payload: Dict[str, Any] = field(default_factory=dict)
    scheduled_for: Optional[datetime] = None
    order_id: Optional[int] = None
    status: OutboxStatus = OutboxStatus.PENDING
    retry_count: int = 0
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
