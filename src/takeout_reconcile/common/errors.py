"""Base error definitions for takeout_reconcile."""

from typing import Any, Dict


class TakeoutReconcileError(Exception):
    """Base exception for all takeout_reconcile errors.

    Keyword arguments are kept as structured context so they can be logged
    next to the message.
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context
