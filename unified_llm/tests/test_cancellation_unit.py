from __future__ import annotations

import pytest

from unified_llm.base.cancellation import CancellationToken, CancelledError


def test_cancel_sets_reason_once():
    token = CancellationToken()
    assert not token.cancelled  # nosec B101 - asserts are appropriate in unit tests
    token.cancel("first")
    token.cancel("second")
    assert token.cancelled and token.reason == "first"  # nosec B101


def test_parent_cancellation_cascades_to_children():
    parent = CancellationToken()
    child = parent.child()
    grandchild = child.child()
    parent.cancel("shutdown")
    assert child.cancelled and grandchild.cancelled  # nosec B101
    assert grandchild.reason == "shutdown"  # nosec B101


def test_linking_to_cancelled_parent_cancels_immediately():
    parent = CancellationToken()
    parent.cancel()
    assert CancellationToken(parent=parent).cancelled  # nosec B101


def test_raise_if_cancelled():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel()
    with pytest.raises(CancelledError, match="operation cancelled"):
        token.raise_if_cancelled()
