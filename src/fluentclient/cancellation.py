r"""Cooperative cancellation of request coordination.

A ``CancellationToken`` is created by the caller and threaded through a
whole coordination. The coordinator checks it before every dispatch and
races it against the dispatch itself and against the wait between two
attempts, so triggering it aborts the coordination at the next
suspension point.
"""

from __future__ import annotations

__all__ = ["CancellationToken"]

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, TypeVar

from fluentclient.exceptions import RequestCancelledError

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class CancellationToken:
    """Signal shared between a caller and the coordinations it started.

    The token is single-use: once cancelled it stays cancelled. It must
    be used from the event loop running the coordinations.

    Example:
        ```pycon
        >>> import asyncio
        >>> from fluentclient.cancellation import CancellationToken
        >>> async def main():
        ...     token = CancellationToken()
        ...     asyncio.get_running_loop().call_later(0.01, token.cancel)
        ...     try:
        ...         await token.sleep(60)
        ...     except Exception as exc:
        ...         return type(exc).__name__
        ...
        >>> asyncio.run(main())
        'RequestCancelledError'

        ```
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(cancelled={self.cancelled})"

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise if cancellation was requested.

        Raises:
            RequestCancelledError: If the token is cancelled.
        """
        if self.cancelled:
            msg = "The request was cancelled"
            raise RequestCancelledError(msg)

    async def sleep(self, delay: float) -> None:
        """Wait for ``delay`` seconds unless cancelled first.

        Args:
            delay: The number of seconds to wait.

        Raises:
            RequestCancelledError: If the token is cancelled before or
                during the wait.
        """
        self.raise_if_cancelled()
        if delay <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return
        self.raise_if_cancelled()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless cancelled first.

        If the token is cancelled while ``awaitable`` is pending, the
        underlying task is cancelled and its outcome discarded.

        Args:
            awaitable: The operation to run.

        Returns:
            The result of ``awaitable``.

        Raises:
            RequestCancelledError: If the token is cancelled before or
                while ``awaitable`` runs.
        """
        if self.cancelled:
            # the operation never starts
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            msg = "The request was cancelled"
            raise RequestCancelledError(msg)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task.done():
            return task.result()

        logger.debug("Cancellation requested, aborting the pending operation")
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        msg = "The request was cancelled"
        raise RequestCancelledError(msg)
