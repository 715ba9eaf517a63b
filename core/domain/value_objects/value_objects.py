"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union
from uuid import UUID, uuid4

CENT = Decimal("0.01")


def to_decimal(value: Union[Decimal, int, str, float, None]) -> Decimal:
    """Coerce a stored or user-supplied amount to Decimal.

    Floats go through str() so 0.1 stays 0.1.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value: Union[Decimal, int, str, float]) -> Decimal:
    """Round an amount to cents, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary value with currency.

    CRITICAL: Always use Decimal, never float!
    """
    amount: Decimal
    currency: str = "BTN"

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', to_decimal(self.amount))

        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"Currency must be 3-letter ISO code, got: {self.currency}"
            )

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def format(self, symbol: str) -> str:
        """Human display form, e.g. ``Nu. 1,234.00``."""
        return f"{symbol} {quantize_money(self.amount):,.2f}"


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for request/worker-cycle tracing."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)
