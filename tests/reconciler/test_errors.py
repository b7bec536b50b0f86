"""Tests for the reconciler error hierarchy."""

from pathlib import Path

import pytest

from takeout_reconcile.common import TakeoutReconcileError
from takeout_reconcile.reconciler.errors import (
    CollaboratorError,
    ReconcileError,
    SidecarParseError,
    ToolNotFoundError,
    UnmatchedSidecarError,
)


@pytest.mark.parametrize("error_class", [
    ToolNotFoundError,
    SidecarParseError,
    CollaboratorError,
])
def test_hierarchy(error_class):
    error = error_class("failed", path="/x")
    assert isinstance(error, ReconcileError)
    assert isinstance(error, TakeoutReconcileError)
    assert error.message == "failed"
    assert error.context == {"path": "/x"}


def test_unmatched_sidecar_error_message():
    error = UnmatchedSidecarError([Path("a.jpg"), Path("b.jpg")], stage="import")

    assert error.unmatched == [Path("a.jpg"), Path("b.jpg")]
    assert error.message == "2 files must have an accompanying metadata file to continue"
    assert error.context == {"count": 2, "stage": "import"}
    assert isinstance(error, ReconcileError)
