"""
SMS template administration.

CRUD over notification templates plus the read-only helpers the admin UI
needs: the placeholder and trigger catalogues and a preview rendered
against a real order.
"""
import logging
from dataclasses import replace
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.template_dto import (
    CreateTemplateRequest,
    PlaceholderDTO,
    PreviewTemplateRequest,
    TemplateDTO,
    TemplatePreviewDTO,
    TriggerDTO,
    UpdateTemplateRequest,
)
from core.data.uow import create_uow
from core.domain.entities import NotificationTemplate
from core.domain.enums import OrderSource, TriggerEvent
from core.domain.exceptions import NotFoundError, ValidationError
from core.utils.datetime import utc_now

from .template_renderer import (
    PLACEHOLDERS,
    TRIGGER_DESCRIPTIONS,
    TemplateRenderer,
    extract_placeholders,
)

logger = logging.getLogger(__name__)


class TemplateService:

    def __init__(self, session_factory: async_sessionmaker, renderer: TemplateRenderer) -> None:
        self._session_factory = session_factory
        self._renderer = renderer

    async def create_template(self, request: CreateTemplateRequest) -> TemplateDTO:
        """Create a template after checking its placeholders and length.

        Raises:
            ValidationError: unknown placeholder, message too long or bad counts
        """
        self._renderer.validate(request.message)
        now = utc_now()
        template = self._build(
            id=None,
            name=request.name.strip(),
            trigger_event=request.trigger_event,
            message=request.message,
            order_source=request.order_source,
            is_active=request.is_active,
            send_count=request.send_count,
            send_delay=request.send_delay,
            priority=request.priority,
            created_at=now,
            updated_at=now,
        )

        uow = create_uow(self._session_factory)
        async with uow:
            template = await uow.templates.add(template)
            await uow.commit()

        logger.info(f"[SMS Templates] Created template {template.id} ({template.trigger_event.value})")
        return self._to_dto(template)

    async def list_templates(
        self,
        trigger_event: Optional[TriggerEvent] = None,
        order_source: Optional[OrderSource] = None,
        is_active: Optional[bool] = None,
    ) -> List[TemplateDTO]:
        uow = create_uow(self._session_factory)
        async with uow:
            templates = await uow.templates.list(
                trigger_event=trigger_event,
                order_source=order_source,
                is_active=is_active,
            )
            return [self._to_dto(template) for template in templates]

    async def get_template(self, template_id: int) -> TemplateDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            template = await uow.templates.get(template_id)
            if template is None:
                raise NotFoundError(f"Template {template_id} not found")
            return self._to_dto(template)

    async def update_template(self, template_id: int, request: UpdateTemplateRequest) -> TemplateDTO:
        """Apply the fields present in ``request``.

        An explicit ``order_source: null`` widens the template to every source.
        """
        changes = request.model_dump(exclude_unset=True)
        if changes.get("message") is not None:
            self._renderer.validate(changes["message"])
        if changes.get("name") is not None:
            changes["name"] = changes["name"].strip()

        uow = create_uow(self._session_factory)
        async with uow:
            template = await uow.templates.get(template_id)
            if template is None:
                raise NotFoundError(f"Template {template_id} not found")

            # Only order_source may be cleared; other nulls mean "unchanged".
            changes = {
                key: value
                for key, value in changes.items()
                if value is not None or key == "order_source"
            }
            try:
                updated = replace(template, updated_at=utc_now(), **changes)
            except ValueError as e:
                raise ValidationError(str(e)) from e

            updated = await uow.templates.save(updated)
            await uow.commit()

        logger.info(f"[SMS Templates] Updated template {template_id}: {', '.join(sorted(changes))}")
        return self._to_dto(updated)

    async def delete_template(self, template_id: int) -> None:
        uow = create_uow(self._session_factory)
        async with uow:
            if not await uow.templates.delete(template_id):
                raise NotFoundError(f"Template {template_id} not found")
            await uow.commit()
        logger.info(f"[SMS Templates] Deleted template {template_id}")

    def placeholders(self) -> List[PlaceholderDTO]:
        return [PlaceholderDTO(name=name, description=text) for name, text in PLACEHOLDERS.items()]

    def triggers(self) -> List[TriggerDTO]:
        return [
            TriggerDTO(event=event, description=text)
            for event, text in TRIGGER_DESCRIPTIONS.items()
        ]

    async def preview(self, request: PreviewTemplateRequest) -> TemplatePreviewDTO:
        """Render ``request.message`` against an existing order. Writes nothing."""
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(request.order_id)
        if order is None:
            raise NotFoundError(f"Order {request.order_id} not found")

        rendered = self._renderer.render(request.message, order, request.additional)
        return TemplatePreviewDTO(
            rendered=rendered,
            length=len(rendered),
            placeholders=extract_placeholders(request.message),
        )

    @staticmethod
    def _build(**fields) -> NotificationTemplate:
        try:
            return NotificationTemplate(**fields)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    @staticmethod
    def _to_dto(template: NotificationTemplate) -> TemplateDTO:
        return TemplateDTO(
            id=template.id,
            name=template.name,
            trigger_event=template.trigger_event,
            message=template.message,
            order_source=template.order_source,
            is_active=template.is_active,
            send_count=template.send_count,
            send_delay=template.send_delay,
            priority=template.priority,
            created_at=template.created_at,
            updated_at=template.updated_at,
        )
