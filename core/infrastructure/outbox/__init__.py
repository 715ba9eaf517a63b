"""Outbox delivery."""
from .worker import OutboxRunStats, OutboxWorker

__all__ = ["OutboxRunStats", "OutboxWorker"]
