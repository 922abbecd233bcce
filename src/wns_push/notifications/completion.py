"""One-shot completion handle for notification sends."""

from __future__ import annotations

import asyncio

from wns_push.errors import WNSError
from wns_push.types import SendResult

__all__ = ["CompletionHandle"]


class CompletionHandle:
    """Resolve a send's future exactly once.

    The first call to resolve() or fail() settles the future; later calls
    are ignored and return False, so a response event followed by a late
    transport error cannot report twice.
    """

    __slots__ = ("_future",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._future: asyncio.Future[SendResult] = (loop or asyncio.get_running_loop()).create_future()

    @property
    def future(self) -> asyncio.Future[SendResult]:
        return self._future

    def done(self) -> bool:
        return self._future.done()

    def resolve(self, result: SendResult) -> bool:
        if self._future.done():
            return False
        self._future.set_result(result)
        return True

    def fail(self, error: WNSError) -> bool:
        if self._future.done():
            return False
        self._future.set_exception(error)
        return True
