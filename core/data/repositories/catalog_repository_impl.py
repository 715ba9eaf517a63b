"""SQLAlchemy implementation of CatalogRepository."""

from typing import Dict, Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import Customer, Product
from core.domain.repositories import CatalogRepository

from ..mappers import CatalogMapper
from ..models import CustomerModel, ProductModel


class SqlAlchemyCatalogRepository(CatalogRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_products(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        ids = list(product_ids)
        if not ids:
            return {}
        result = await self._session.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        )
        return {
            model.id: CatalogMapper.product_to_domain(model)
            for model in result.unique().scalars().all()
        }

    async def increment_sales_count(self, product_id: int, quantity: int) -> None:
        await self._session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(sales_count=ProductModel.sales_count + quantity)
            .execution_options(synchronize_session=False)
        )

    async def get_customer(self, customer_id: int) -> Optional[Customer]:
        model = await self._session.get(CustomerModel, customer_id)
        return CatalogMapper.customer_to_domain(model) if model else None

    async def find_or_create_customer(
        self, name: str, phone: Optional[str], email: Optional[str]
    ) -> Customer:
        if phone:
            result = await self._session.execute(
                select(CustomerModel).where(CustomerModel.phone == phone)
            )
            existing = result.scalar_one_or_none()
            if existing:
                return CatalogMapper.customer_to_domain(existing)

        model = CustomerModel(name=name.strip(), phone=phone, email=email)
        self._session.add(model)
        await self._session.flush()
        return CatalogMapper.customer_to_domain(model)
