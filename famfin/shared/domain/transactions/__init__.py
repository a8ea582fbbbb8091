"""Transaction operations and dashboard aggregates."""

from .service import TransactionService

__all__ = ["TransactionService"]
