"""SQLAlchemy ORM models for SMS templates and the outbox."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from core.utils.datetime import utc_now

from .base import Base


class SmsTemplateModel(Base):
    """SQLAlchemy ORM model for sms_templates table."""

    __tablename__ = "sms_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    trigger_event = Column(String(40), nullable=False)
    order_source = Column(String(20), nullable=True)
    message = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    send_count = Column(Integer, default=1, nullable=False)
    send_delay = Column(Integer, default=0, nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_sms_templates_trigger", "trigger_event", "is_active", "priority"),
    )


class OutboxModel(Base):
    """SQLAlchemy ORM model for outbox table. Rows are never deleted."""

    __tablename__ = "outbox"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_type = Column(String(32), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, index=True)
    payload = Column(JSON, nullable=False)
    scheduled_for = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default="PENDING")
    retry_count = Column(Integer, default=0, nullable=False)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_outbox_status_scheduled_for", "status", "scheduled_for"),
    )
