"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..entities import Order, OrderDiscount
from ..enums import FulfillmentStatus, PaymentStatus


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Insert a new order with its items.

        Returns:
            The persisted order with database ids filled in
        """
        pass

    @abstractmethod
    async def save(self, order: Order) -> Order:
        """Write back the mutable fields of an existing order."""
        pass

    @abstractmethod
    async def get(self, order_id: int, for_update: bool = False) -> Optional[Order]:
        """Retrieve order by id.

        Args:
            order_id: Order primary key
            for_update: Lock the order row until the transaction ends

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def list(
        self,
        limit: int = 100,
        offset: int = 0,
        fulfillment_status: Optional[FulfillmentStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> List[Order]:
        """List orders, newest first."""
        pass

    @abstractmethod
    async def last_order_number(self, prefix: str, year: int) -> Optional[str]:
        """Highest order number issued for ``prefix``/``year``."""
        pass

    @abstractmethod
    async def last_receipt_number(self, prefix: str, year: int) -> Optional[str]:
        """Highest receipt number issued for ``prefix``/``year``."""
        pass

    @abstractmethod
    async def add_discounts(self, order_id: int, discounts: Sequence[OrderDiscount]) -> None:
        """Record the discounts applied to a new order."""
        pass

    @abstractmethod
    async def list_discounts(self, order_id: int) -> List[OrderDiscount]:
        pass
