"""Sequential document numbers (order numbers, receipt numbers)."""
import re
from dataclasses import dataclass

_PATTERN = re.compile(r"^(?P<prefix>[A-Z]+)-(?P<year>\d{4})-(?P<seq>\d{4,})$")


@dataclass(frozen=True)
class DocumentNumber:
    """
    Human-readable number of the form ``<PREFIX>-<YEAR>-<NNNN>``.

    The sequence restarts every calendar year and is zero-padded to
    at least four digits.

    Examples:
    - ORD-2025-0001
    - RCP-2025-0142
    """
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Document number cannot be empty")
        if not _PATTERN.match(self.value):
            raise ValueError(
                f"Invalid document number format (expected PREFIX-YYYY-NNNN): {self.value}"
            )

    @classmethod
    def build(cls, prefix: str, year: int, sequence: int) -> "DocumentNumber":
        if sequence < 1:
            raise ValueError(f"Sequence must be positive, got {sequence}")
        return cls(value=f"{prefix}-{year}-{sequence:04d}")

    @property
    def prefix(self) -> str:
        return _PATTERN.match(self.value).group("prefix")

    @property
    def year(self) -> int:
        return int(_PATTERN.match(self.value).group("year"))

    @property
    def sequence(self) -> int:
        return int(_PATTERN.match(self.value).group("seq"))

    def next(self) -> "DocumentNumber":
        """Following number in the same year."""
        return self.build(self.prefix, self.year, self.sequence + 1)

    def __str__(self) -> str:
        return self.value


class OrderNumber(DocumentNumber):
    """Order number, e.g. ORD-2025-0001."""


class ReceiptNumber(DocumentNumber):
    """Receipt number, e.g. RCP-2025-0001. Issued exactly once per paid order."""


def next_document_number(cls, prefix: str, year: int, last: "str | None") -> DocumentNumber:
    """Allocate the number following ``last`` (or the first of the year).

    ``last`` is the highest number already issued for ``prefix``/``year``.
    """
    if not last:
        return cls.build(prefix, year, 1)
    return cls(value=last).next()
