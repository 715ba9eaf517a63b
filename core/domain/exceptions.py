"""
Domain error taxonomy.

ValidationError and NotFoundError subclass ValueError so existing
"ValueError -> 400" handlers keep treating them as client errors.
"""
from typing import Optional


class DomainError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError, ValueError):
    """Malformed input or illegal state transition. Nothing was written."""


class NotFoundError(DomainError, ValueError):
    """Unknown order, product, discount or template id."""


class ConflictError(DomainError):
    """Duplicate posting, re-processed payment or lost race on a shared counter."""


class TransientExternalError(DomainError):
    """SMS provider or payment gateway unreachable. Retried by the caller's policy."""
