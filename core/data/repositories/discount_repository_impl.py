"""SQLAlchemy implementation of DiscountRepository."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import Discount
from core.domain.repositories import DiscountRepository

from ..mappers import DiscountMapper
from ..models import DiscountModel, ProductCategoryModel, ProductModel, ProductSubCategoryModel


class SqlAlchemyDiscountRepository(DiscountRepository):
    """Discount rules with their product/category associations eagerly loaded."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_live(self, now: datetime) -> List[Discount]:
        result = await self._session.execute(
            select(DiscountModel)
            .where(
                DiscountModel.is_active.is_(True),
                DiscountModel.start_date <= now,
                DiscountModel.end_date >= now,
            )
            .order_by(DiscountModel.id)
            .execution_options(populate_existing=True)
        )
        return [DiscountMapper.to_domain(model) for model in result.scalars().all()]

    async def get(self, discount_id: int) -> Optional[Discount]:
        result = await self._session.execute(
            select(DiscountModel)
            .where(DiscountModel.id == discount_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return DiscountMapper.to_domain(model) if model else None

    async def add(self, discount: Discount) -> Discount:
        model = DiscountMapper.to_persistence(discount)
        if discount.product_ids:
            model.products = await self._load(ProductModel, discount.product_ids)
        if discount.category_ids:
            model.categories = await self._load(ProductCategoryModel, discount.category_ids)
        if discount.subcategory_ids:
            model.subcategories = await self._load(
                ProductSubCategoryModel, discount.subcategory_ids
            )
        self._session.add(model)
        await self._session.flush()
        return await self.get(model.id)

    async def increment_usage(self, discount_id: int) -> bool:
        result = await self._session.execute(
            update(DiscountModel)
            .where(
                DiscountModel.id == discount_id,
                or_(
                    DiscountModel.max_usage_count.is_(None),
                    DiscountModel.usage_count < DiscountModel.max_usage_count,
                ),
            )
            .values(usage_count=DiscountModel.usage_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def _load(self, model_cls, ids) -> list:
        result = await self._session.execute(select(model_cls).where(model_cls.id.in_(list(ids))))
        models = result.unique().scalars().all()
        missing = set(ids) - {m.id for m in models}
        if missing:
            raise ValueError(f"Unknown {model_cls.__tablename__} ids: {sorted(missing)}")
        return list(models)
