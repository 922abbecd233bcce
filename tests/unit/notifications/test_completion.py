"""Unit tests for the one-shot completion handle."""

from __future__ import annotations

import pytest

from wns_push.errors import TransportError, WNSError
from wns_push.notifications import CompletionHandle
from wns_push.types import SendResult


class TestCompletionHandle:
    """Test exactly-once settlement."""

    async def test_resolve_settles_future(self) -> None:
        handle = CompletionHandle()
        result = SendResult(status_code=200)

        assert handle.resolve(result) is True
        assert handle.done()
        assert await handle.future is result

    async def test_fail_settles_future(self) -> None:
        handle = CompletionHandle()

        assert handle.fail(WNSError("boom")) is True

        with pytest.raises(WNSError, match="boom"):
            _ = await handle.future

    async def test_late_error_after_result_ignored(self) -> None:
        """Test that a transport error after the response cannot report twice."""
        handle = CompletionHandle()
        result = SendResult(status_code=200)
        _ = handle.resolve(result)

        assert handle.fail(TransportError("late", cause=OSError("reset"))) is False
        assert await handle.future is result

    async def test_second_error_ignored(self) -> None:
        handle = CompletionHandle()
        first = WNSError("first")
        _ = handle.fail(first)

        assert handle.fail(WNSError("second")) is False
        assert handle.future.exception() is first

    async def test_cancelled_future_not_resolved(self) -> None:
        """Test that a caller-cancelled future is left alone."""
        handle = CompletionHandle()
        _ = handle.future.cancel()

        assert handle.resolve(SendResult(status_code=200)) is False
        assert handle.future.cancelled()
