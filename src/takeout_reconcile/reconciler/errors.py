"""Error classes for the reconciler."""

from pathlib import Path
from typing import Any, Sequence

from takeout_reconcile.common import TakeoutReconcileError


class ReconcileError(TakeoutReconcileError):
    """Base error for reconciliation runs."""
    pass


class ToolNotFoundError(ReconcileError):
    """Required external tool is missing or too old."""
    pass


class UnmatchedSidecarError(ReconcileError):
    """One or more media files have no locatable JSON sidecar.

    Carries every unmatched file, not just the first one found.
    """

    def __init__(self, unmatched: Sequence[Path], **context: Any) -> None:
        self.unmatched = list(unmatched)
        super().__init__(
            f"{len(self.unmatched)} files must have an accompanying metadata file to continue",
            count=len(self.unmatched),
            **context,
        )


class SidecarParseError(ReconcileError):
    """Sidecar JSON is unreadable or lacks a numeric capture timestamp."""
    pass


class CollaboratorError(ReconcileError):
    """An external collaborator (extract, merge, stamp) failed."""
    pass
