"""Shared fixtures: in-memory database, fixed clock, settings and seed helpers."""

from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from typing import Iterable, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from apps.api.deps import build_order_service
from core.data.models import (
    AffiliateModel,
    Base,
    ProductCategoryModel,
    ProductModel,
    ProductSubCategoryModel,
)
from core.data.uow import create_uow
from core.domain.entities import Discount, NotificationTemplate
from core.domain.enums import (
    DiscountScope,
    DiscountType,
    DiscountValueType,
    OrderSource,
    TriggerEvent,
)
from core.infrastructure.database import build_session_factory
from core.settings import AppSettings
from core.settings.modules import (
    AccountingSettings,
    DatabaseSettings,
    OutboxSettings,
    SmsSettings,
    StorefrontSettings,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
T0 = datetime(2025, 1, 15, 10, 0, 0)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        database=DatabaseSettings(database_url=TEST_DATABASE_URL),
        outbox=OutboxSettings(
            poll_interval_seconds=1,
            batch_size=50,
            max_retries=3,
            retry_base_delay_seconds=60,
            processing_timeout_seconds=600,
        ),
        sms=SmsSettings(fallback_enabled=False),
        accounting=AccountingSettings(),
        storefront=StorefrontSettings(
            frontend_url="https://shop.example.bt",
            support_phone="17123456",
        ),
    )


@pytest_asyncio.fixture
async def engine():
    """In-memory engine with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def order_service(session_factory, app_settings, clock):
    return build_order_service(session_factory, app_settings, clock=clock)


# ---------------------------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------------------------


async def seed_catalog(session_factory) -> dict:
    """Two categories, three sub-categories, four products.

    Returns ids by name: ``{"fruit": .., "apples": .., "apple": .., ...}``.
    """
    async with session_factory() as session:
        fruit = ProductCategoryModel(name="Fruit")
        dairy = ProductCategoryModel(name="Dairy")
        session.add_all([fruit, dairy])
        await session.flush()

        apples = ProductSubCategoryModel(name="Apples", category_id=fruit.id)
        citrus = ProductSubCategoryModel(name="Citrus", category_id=fruit.id)
        cheese = ProductSubCategoryModel(name="Cheese", category_id=dairy.id)
        session.add_all([apples, citrus, cheese])
        await session.flush()

        products = {
            "apple": ProductModel(name="Apple", price=Decimal("100.00"), sub_category_id=apples.id),
            "orange": ProductModel(name="Orange", price=Decimal("50.00"), sub_category_id=citrus.id),
            "cheese": ProductModel(name="Datshi", price=Decimal("250.00"), sub_category_id=cheese.id),
            "retired": ProductModel(
                name="Retired", price=Decimal("10.00"), sub_category_id=cheese.id, is_available=False
            ),
        }
        session.add_all(products.values())
        await session.commit()

        ids = {name: model.id for name, model in products.items()}
        ids.update(
            fruit=fruit.id,
            dairy=dairy.id,
            apples=apples.id,
            citrus=citrus.id,
            cheese_sub=cheese.id,
        )
        return ids


async def seed_discount(
    session_factory,
    name: str = "Ten percent off",
    discount_type: DiscountType = DiscountType.ALL_PRODUCTS,
    value_type: DiscountValueType = DiscountValueType.PERCENTAGE,
    value: str = "10",
    scope: DiscountScope = DiscountScope.PER_PRODUCT,
    voucher_code: Optional[str] = None,
    max_usage_count: Optional[int] = None,
    min_order_value: Optional[str] = None,
    product_ids: Iterable[int] = (),
    category_ids: Iterable[int] = (),
    subcategory_ids: Iterable[int] = (),
    start: datetime = T0 - timedelta(days=1),
    end: datetime = T0 + timedelta(days=30),
) -> Discount:
    uow = create_uow(session_factory)
    async with uow:
        discount = await uow.discounts.add(
            Discount(
                id=None,
                name=name,
                discount_type=discount_type,
                value_type=value_type,
                value=Decimal(value),
                scope=scope,
                start_date=start,
                end_date=end,
                voucher_code=voucher_code,
                max_usage_count=max_usage_count,
                min_order_value=Decimal(min_order_value) if min_order_value else None,
                product_ids=frozenset(product_ids),
                category_ids=frozenset(category_ids),
                subcategory_ids=frozenset(subcategory_ids),
            )
        )
        await uow.commit()
        return discount


async def seed_template(
    session_factory,
    trigger_event: TriggerEvent,
    message: str = "Hi {{customerName}}, order {{orderNumber}} update",
    name: Optional[str] = None,
    order_source: Optional[OrderSource] = None,
    send_count: int = 1,
    send_delay: int = 0,
    priority: int = 0,
    is_active: bool = True,
) -> NotificationTemplate:
    uow = create_uow(session_factory)
    async with uow:
        template = await uow.templates.add(
            NotificationTemplate(
                id=None,
                name=name or f"{trigger_event.value} template",
                trigger_event=trigger_event,
                message=message,
                order_source=order_source,
                is_active=is_active,
                send_count=send_count,
                send_delay=send_delay,
                priority=priority,
            )
        )
        await uow.commit()
        return template


async def seed_affiliate(
    session_factory, voucher_code: str = "FRIEND10", percentage: str = "5", is_active: bool = True
) -> int:
    async with session_factory() as session:
        affiliate = AffiliateModel(
            name="Karma Dorji",
            voucher_code=voucher_code,
            commission_percentage=Decimal(percentage),
            is_active=is_active,
        )
        session.add(affiliate)
        await session.commit()
        return affiliate.id


@pytest_asyncio.fixture
async def catalog(session_factory) -> dict:
    return await seed_catalog(session_factory)


@pytest.fixture
def make_discount(session_factory):
    async def _make(**kwargs) -> Discount:
        return await seed_discount(session_factory, **kwargs)

    return _make


@pytest.fixture
def make_template(session_factory):
    async def _make(trigger_event: TriggerEvent, **kwargs) -> NotificationTemplate:
        return await seed_template(session_factory, trigger_event, **kwargs)

    return _make


@pytest.fixture
def make_affiliate(session_factory):
    async def _make(**kwargs) -> int:
        return await seed_affiliate(session_factory, **kwargs)

    return _make


@pytest.fixture
def seeders() -> SimpleNamespace:
    """Seed helpers for tests that drive their own event loop."""
    return SimpleNamespace(
        catalog=seed_catalog,
        discount=seed_discount,
        template=seed_template,
        affiliate=seed_affiliate,
    )
