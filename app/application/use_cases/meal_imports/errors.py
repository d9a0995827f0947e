"""Exceptions raised by the bulk meal import use cases."""

from app.infrastructure.pending_batches import PendingBatchNotFoundError


class SpreadsheetFormatError(ValueError):
    """The uploaded file cannot be read as a meal sheet at all."""


__all__ = ["PendingBatchNotFoundError", "SpreadsheetFormatError"]
