"""Domain value objects."""

from .value_objects import CENT, ExecutionID, Money, quantize_money, to_decimal
from .order_number import (
    DocumentNumber,
    OrderNumber,
    ReceiptNumber,
    next_document_number,
)

__all__ = [
    "CENT",
    "DocumentNumber",
    "ExecutionID",
    "Money",
    "OrderNumber",
    "ReceiptNumber",
    "next_document_number",
    "quantize_money",
    "to_decimal",
]
