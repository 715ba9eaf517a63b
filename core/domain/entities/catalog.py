"""Read-only catalog and customer lookups used at order creation."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: Decimal
    is_available: bool = True
    subcategory_id: Optional[int] = None
    # Parent category of the sub-category, resolved by the repository.
    category_id: Optional[int] = None
    sales_count: int = 0


@dataclass(frozen=True)
class Customer:
    id: Optional[int]
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
