"""Read-side lookups for products and customers."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from ..entities import Customer, Product


class CatalogRepository(ABC):

    @abstractmethod
    async def get_products(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """Products by id, with their sub-category's parent category resolved."""
        pass

    @abstractmethod
    async def increment_sales_count(self, product_id: int, quantity: int) -> None:
        pass

    @abstractmethod
    async def get_customer(self, customer_id: int) -> Optional[Customer]:
        pass

    @abstractmethod
    async def find_or_create_customer(
        self, name: str, phone: Optional[str], email: Optional[str]
    ) -> Customer:
        """Match by phone number; create the customer if unknown."""
        pass
