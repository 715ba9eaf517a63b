"""FastAPI dependencies for dependency injection.

Services are wired explicitly from settings; tests override
``get_db_session_factory`` (and, where needed, ``get_payment_gateway``).
"""

from datetime import datetime
from typing import Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.application.interfaces import IPaymentGateway
from core.application.services import (
    CommissionAccrual,
    DiscountEngine,
    LedgerPoster,
    NotificationScheduler,
    OrderApplicationService,
    PaymentService,
    TemplateRenderer,
    TemplateService,
)
from core.infrastructure.adapters.payments import MockPaymentGateway
from core.infrastructure.database import lifecycle
from core.settings import AppSettings, get_app_settings
from core.utils.datetime import utc_now

# Gateway wire protocols live outside this service; the mock accepts everything.
_payment_gateway: IPaymentGateway = MockPaymentGateway()


def get_settings() -> AppSettings:
    return get_app_settings()


def get_db_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get SQLAlchemy session factory.

    Returns:
        async_sessionmaker instance
    """
    return lifecycle.get_session_factory()


def get_payment_gateway() -> IPaymentGateway:
    return _payment_gateway


def build_renderer(settings: AppSettings) -> TemplateRenderer:
    return TemplateRenderer(settings.storefront, max_length=settings.sms.max_message_length)


def build_order_service(
    session_factory: async_sessionmaker,
    settings: AppSettings,
    clock: Callable[[], datetime] = utc_now,
) -> OrderApplicationService:
    """Wire an OrderApplicationService and its collaborators."""
    return OrderApplicationService(
        session_factory=session_factory,
        discount_engine=DiscountEngine(
            session_factory,
            currency_symbol=settings.storefront.currency_symbol,
            clock=clock,
        ),
        ledger_poster=LedgerPoster(settings.accounting),
        commission=CommissionAccrual(),
        scheduler=NotificationScheduler(
            build_renderer(settings),
            fallback_enabled=settings.sms.fallback_enabled,
            clock=clock,
        ),
        storefront=settings.storefront,
        clock=clock,
    )


def get_order_service(
    session_factory: async_sessionmaker = Depends(get_db_session_factory),
    settings: AppSettings = Depends(get_settings),
) -> OrderApplicationService:
    """Get OrderApplicationService instance.

    Returns:
        OrderApplicationService instance
    """
    return build_order_service(session_factory, settings)


def get_template_service(
    session_factory: async_sessionmaker = Depends(get_db_session_factory),
    settings: AppSettings = Depends(get_settings),
) -> TemplateService:
    return TemplateService(session_factory, build_renderer(settings))


def get_payment_service(
    orders: OrderApplicationService = Depends(get_order_service),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
) -> PaymentService:
    return PaymentService(gateway, orders)
