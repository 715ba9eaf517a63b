"""SQLAlchemy implementation of OrderRepository."""

from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import Order, OrderDiscount
from core.domain.enums import FulfillmentStatus, PaymentStatus
from core.domain.repositories import OrderRepository

from ..mappers import OrderDiscountMapper, OrderMapper
from ..models import OrderDiscountModel, OrderModel


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def add(self, order: Order) -> Order:
        """Insert order and items, then reload it with generated ids."""
        model = OrderMapper.to_persistence(order)
        self._session.add(model)
        await self._session.flush()  # Propagate to DB without committing

        loaded = await self.get(model.id)
        return loaded

    async def save(self, order: Order) -> Order:
        """Write back status, timestamps and editable fields."""
        model = await self._session.get(OrderModel, order.id)
        if model is None:
            raise ValueError(f"Order {order.id} does not exist")
        OrderMapper.update_persistence(order, model)
        await self._session.flush()
        return order

    async def get(self, order_id: int, for_update: bool = False) -> Optional[Order]:
        """Retrieve order by id, optionally locking its row.

        Always re-reads the row so callers validate against committed state
        rather than a cached instance.
        """
        stmt = (
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update(of=OrderModel)
        result = await self._session.execute(stmt)
        model = result.unique().scalar_one_or_none()

        if not model:
            return None

        return OrderMapper.to_domain(model)

    async def list(
        self,
        limit: int = 100,
        offset: int = 0,
        fulfillment_status: Optional[FulfillmentStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> List[Order]:
        stmt = select(OrderModel)
        if fulfillment_status is not None:
            stmt = stmt.where(OrderModel.fulfillment_status == fulfillment_status.value)
        if payment_status is not None:
            stmt = stmt.where(OrderModel.payment_status == payment_status.value)
        stmt = stmt.order_by(OrderModel.id.desc()).offset(offset).limit(limit)

        result = await self._session.execute(stmt)
        models = result.unique().scalars().all()

        return [OrderMapper.to_domain(model) for model in models]

    async def last_order_number(self, prefix: str, year: int) -> Optional[str]:
        return await self._last_number(OrderModel.order_number, prefix, year)

    async def last_receipt_number(self, prefix: str, year: int) -> Optional[str]:
        return await self._last_number(OrderModel.receipt_number, prefix, year)

    async def _last_number(self, column, prefix: str, year: int) -> Optional[str]:
        # Longer means larger once the sequence outgrows four digits.
        result = await self._session.execute(
            select(column)
            .where(column.like(f"{prefix}-{year}-%"))
            .order_by(func.length(column).desc(), column.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def add_discounts(self, order_id: int, discounts: Sequence[OrderDiscount]) -> None:
        self._session.add_all(
            [OrderDiscountMapper.to_persistence(discount, order_id) for discount in discounts]
        )
        await self._session.flush()

    async def list_discounts(self, order_id: int) -> List[OrderDiscount]:
        result = await self._session.execute(
            select(OrderDiscountModel)
            .where(OrderDiscountModel.order_id == order_id)
            .order_by(OrderDiscountModel.id)
        )
        return [OrderDiscountMapper.to_domain(model) for model in result.scalars().all()]
