"""Repository interface for discount rules."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..entities import Discount


class DiscountRepository(ABC):

    @abstractmethod
    async def list_live(self, now: datetime) -> List[Discount]:
        """Active discounts whose window contains ``now``, in load (id) order,
        with their product/category/sub-category associations."""
        pass

    @abstractmethod
    async def get(self, discount_id: int) -> Optional[Discount]:
        pass

    @abstractmethod
    async def add(self, discount: Discount) -> Discount:
        pass

    @abstractmethod
    async def increment_usage(self, discount_id: int) -> bool:
        """Atomically bump ``usage_count`` if the cap is not reached.

        Returns:
            False when the cap was hit (e.g. by a concurrent order)
        """
        pass
