r"""Coordinate the repeated dispatch of a request under retry policies.

The coordinator drives one sequential attempt loop per request:

1. materialize a fresh request from the snapshot;
2. dispatch it and capture the response or the transport error;
3. ask each policy, in configured order, whether to retry; the first
   policy voting for a retry supplies the delay;
4. return the outcome if no policy votes for a retry, otherwise wait and
   loop.

The coordinator never raises on an HTTP error response: deciding what a
final error response means is the caller's concern.
"""

from __future__ import annotations

__all__ = ["RetryCoordinator"]

import logging
from typing import TYPE_CHECKING

import httpx

from fluentclient.cancellation import CancellationToken
from fluentclient.exceptions import TransportError
from fluentclient.retry.attempt import RetryAttempt
from fluentclient.retry.policy import RetryPolicy, normalize_policies
from fluentclient.snapshot import RequestSnapshot, materialize, snapshot_request
from fluentclient.utils.structured_logging import log_structured
from fluentclient.utils.validation import validate_max_attempts

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

logger: logging.Logger = logging.getLogger(__name__)


class RetryCoordinator:
    """Dispatch a request until no retry policy asks for another attempt.

    Policies are only read, so a coordinator can be shared by many
    concurrent requests.

    Args:
        policies: A policy, a sequence of policies, or ``None`` to never
            retry. ``None`` entries in a sequence are ignored.
        max_attempts: Optional ceiling on the total number of dispatches.
            ``None`` leaves the stopping conditions to the policies.
        on_retry: Optional callback invoked with the ``RetryAttempt`` of
            each attempt about to be retried, before the wait.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from fluentclient.retry import RetryCoordinator, fixed_intervals, retry_on_status
        >>> responses = iter([httpx.Response(503), httpx.Response(200)])
        >>> async def dispatch(request):
        ...     return next(responses)
        ...
        >>> coordinator = RetryCoordinator(fixed_intervals(retry_on_status(503), [0.01]))
        >>> request = httpx.Request("GET", "https://example.org/status")
        >>> asyncio.run(coordinator.execute(request, dispatch)).status_code
        200

        ```
    """

    def __init__(
        self,
        policies: RetryPolicy | Iterable[RetryPolicy | None] | None = None,
        *,
        max_attempts: int | None = None,
        on_retry: Callable[[RetryAttempt], None] | None = None,
    ) -> None:
        validate_max_attempts(max_attempts)
        self.policies: tuple[RetryPolicy, ...] = normalize_policies(policies)
        self.max_attempts = max_attempts
        self.on_retry = on_retry

    def __repr__(self) -> str:
        names = ", ".join(policy.name for policy in self.policies)
        return f"{self.__class__.__qualname__}(policies=[{names}], max_attempts={self.max_attempts})"

    def select_policy(self, outcome: RetryAttempt) -> RetryPolicy | None:
        """Find the first policy voting to retry an attempt.

        Args:
            outcome: The outcome of the attempt.

        Returns:
            The first policy voting for a retry, or ``None`` if the
            outcome is final.
        """
        for policy in self.policies:
            if policy.should_retry(outcome.attempt, outcome.response, outcome.error):
                return policy
        return None

    async def execute(
        self,
        request: httpx.Request | RequestSnapshot,
        dispatch: Callable[[httpx.Request], Awaitable[httpx.Response]],
        cancellation: CancellationToken | None = None,
    ) -> httpx.Response:
        """Dispatch a request, retrying as long as a policy asks for it.

        Args:
            request: The request to send, or its snapshot. A request is
                snapshotted before the first dispatch.
            dispatch: Sends a request and returns its response, or raises
                ``httpx.RequestError`` on transport failure.
            cancellation: Optional token aborting the coordination.

        Returns:
            The response of the last attempt, whatever its status code.

        Raises:
            SnapshotError: If the request body cannot be buffered. No
                attempt is made.
            TransportError: If the last attempt failed below the HTTP
                layer.
            RequestCancelledError: If ``cancellation`` is triggered.
        """
        token = cancellation if cancellation is not None else CancellationToken()
        token.raise_if_cancelled()
        snapshot = request if isinstance(request, RequestSnapshot) else await snapshot_request(request)
        method, url = snapshot.method, str(snapshot.url)

        attempt = 0
        delay = 0.0
        while True:
            attempt += 1
            outcome = await self._dispatch_once(snapshot, dispatch, token, attempt, delay)

            policy = self.select_policy(outcome)
            if policy is not None and self.max_attempts is not None and attempt >= self.max_attempts:
                logger.debug(
                    f"{method} request to {url}: max_attempts ({self.max_attempts}) reached, "
                    f"not retrying"
                )
                policy = None

            if policy is None:
                return self._finish(outcome, method, url)

            try:
                delay = policy.delay_for(outcome.attempt, outcome.response, outcome.error)
                log_structured(
                    logger,
                    logging.DEBUG,
                    f"{method} request to {url}: retrying attempt {attempt} in {delay:.3f}s "
                    f"({policy.name})",
                    method=method,
                    url=url,
                    attempt=attempt,
                    delay=delay,
                    status_code=outcome.status_code,
                )
                if self.on_retry is not None:
                    self.on_retry(outcome)
            finally:
                # the discarded response is released even if the delay or the hook fails
                if outcome.response is not None:
                    await outcome.response.aclose()
            await token.sleep(delay)

    async def _dispatch_once(
        self,
        snapshot: RequestSnapshot,
        dispatch: Callable[[httpx.Request], Awaitable[httpx.Response]],
        token: CancellationToken,
        attempt: int,
        delay: float,
    ) -> RetryAttempt:
        outgoing = materialize(snapshot)
        try:
            response = await token.run(dispatch(outgoing))
        except httpx.RequestError as exc:
            logger.debug(f"{snapshot.method} request to {snapshot.url} failed: {exc!r}")
            return RetryAttempt(attempt=attempt, error=exc, elapsed_delay=delay)
        return RetryAttempt(attempt=attempt, response=response, elapsed_delay=delay)

    def _finish(self, outcome: RetryAttempt, method: str, url: str) -> httpx.Response:
        if outcome.error is not None:
            exc = outcome.error
            if isinstance(exc, httpx.TimeoutException):
                message = f"{method} request to {url} timed out ({outcome.attempt} attempts)"
            else:
                message = f"{method} request to {url} failed after {outcome.attempt} attempts: {exc}"
            raise TransportError(method=method, url=url, message=message, cause=exc) from exc

        response = outcome.response
        logger.debug(
            f"{method} request to {url} completed with status {response.status_code} "
            f"after {outcome.attempt} attempts"
        )
        return response
