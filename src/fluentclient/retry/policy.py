r"""Retry policies deciding whether an attempt is retried and how long to
wait before the next one.

A policy is a plain pair of functions. Policies are stateless, so a single
instance can be shared by the client defaults and by many concurrent
coordinations.
"""

from __future__ import annotations

__all__ = [
    "RetryPolicy",
    "computed_delay",
    "fixed_intervals",
    "is_transient",
    "normalize_policies",
    "retry_on_status",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from fluentclient.config import RETRY_STATUS_CODES
from fluentclient.utils.validation import validate_delay, validate_max_retries

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import timedelta

    ShouldRetry = Callable[[httpx.Response | None, Exception | None], bool]


@dataclass(frozen=True)
class RetryPolicy:
    """Pair of a retry predicate and a delay function.

    Both functions receive the attempt number (1-indexed) and the outcome
    of that attempt: the response, or the transport error when no response
    was received.

    Attributes:
        should_retry: Returns whether the attempt should be retried.
        get_delay: Returns the delay before the next attempt, in seconds
            or as a ``timedelta``.
        name: A label used in log messages.

    Example:
        ```pycon
        >>> import httpx
        >>> from fluentclient.retry import RetryPolicy
        >>> policy = RetryPolicy(
        ...     should_retry=lambda attempt, response, error: attempt <= 2 and error is not None,
        ...     get_delay=lambda attempt, response, error: 0.1,
        ... )
        >>> policy.should_retry(1, None, httpx.ConnectError("refused"))
        True

        ```
    """

    should_retry: Callable[[int, httpx.Response | None, Exception | None], bool]
    get_delay: Callable[[int, httpx.Response | None, Exception | None], float | timedelta]
    name: str = "custom"

    def delay_for(
        self, attempt: int, response: httpx.Response | None, error: Exception | None
    ) -> float:
        """Compute the delay before the next attempt.

        Returns:
            The delay in seconds.

        Raises:
            ValueError: If the delay function returns a negative delay.
        """
        return validate_delay(self.get_delay(attempt, response, error))


def fixed_intervals(
    should_retry: ShouldRetry, intervals: Sequence[float | timedelta]
) -> RetryPolicy:
    """Create a policy waiting a fixed interval before each retry.

    Attempt ``i`` is retried if ``i <= len(intervals)`` and
    ``should_retry`` is true for its outcome; the delay is
    ``intervals[i - 1]``. The number of retries is therefore the number
    of intervals.

    Args:
        should_retry: Returns whether an outcome should be retried. It
            receives the response (or ``None``) and the transport error
            (or ``None``).
        intervals: The delays between consecutive attempts.

    Returns:
        The retry policy.

    Raises:
        ValueError: If an interval is negative.

    Example:
        ```pycon
        >>> from fluentclient.retry import fixed_intervals, retry_on_status
        >>> policy = fixed_intervals(retry_on_status(503), [1.0, 2.0])
        >>> policy.get_delay(2, None, None)
        2.0

        ```
    """
    delays = tuple(validate_delay(interval) for interval in intervals)

    def _should_retry(attempt: int, response: httpx.Response | None, error: Exception | None) -> bool:
        return attempt <= len(delays) and should_retry(response, error)

    def _get_delay(attempt: int, response: httpx.Response | None, error: Exception | None) -> float:  # noqa: ARG001
        return delays[attempt - 1]

    return RetryPolicy(should_retry=_should_retry, get_delay=_get_delay, name="fixed_intervals")


def computed_delay(
    max_retries: int,
    should_retry: ShouldRetry,
    get_delay: Callable[[int, httpx.Response | None], float | timedelta],
) -> RetryPolicy:
    """Create a policy computing the delay before each retry.

    Attempt ``i`` is retried if ``i <= max_retries`` and ``should_retry``
    is true for its outcome.

    Args:
        max_retries: The maximum number of retries. Must be >= 0.
        should_retry: Returns whether an outcome should be retried. It
            receives the response (or ``None``) and the transport error
            (or ``None``).
        get_delay: Returns the delay before the next attempt. It receives
            the attempt number (1-indexed) and the last response (``None``
            after a transport error).

    Returns:
        The retry policy.

    Raises:
        ValueError: If ``max_retries`` is negative.

    Example:
        ```pycon
        >>> from fluentclient.retry import computed_delay, is_transient
        >>> policy = computed_delay(3, is_transient, lambda attempt, response: 0.5 * 2**attempt)
        >>> policy.get_delay(2, None, None)
        2.0

        ```
    """
    validate_max_retries(max_retries)

    def _should_retry(attempt: int, response: httpx.Response | None, error: Exception | None) -> bool:
        return attempt <= max_retries and should_retry(response, error)

    def _get_delay(
        attempt: int, response: httpx.Response | None, error: Exception | None  # noqa: ARG001
    ) -> float | timedelta:
        return get_delay(attempt, response)

    return RetryPolicy(should_retry=_should_retry, get_delay=_get_delay, name="computed_delay")


def normalize_policies(
    config: RetryPolicy | Iterable[RetryPolicy | None] | None,
) -> tuple[RetryPolicy, ...]:
    """Turn a retry configuration into an ordered tuple of policies.

    ``None`` means no retry, either as the whole configuration or as an
    entry of a sequence.

    Args:
        config: A policy, a sequence of policies, or ``None``.

    Returns:
        The policies in configured order.

    Raises:
        TypeError: If an entry is not a ``RetryPolicy``.
    """
    if config is None:
        return ()
    if isinstance(config, RetryPolicy):
        return (config,)
    policies = []
    for policy in config:
        if policy is None:
            continue
        if not isinstance(policy, RetryPolicy):
            msg = f"Expected a RetryPolicy but received {type(policy).__qualname__}"
            raise TypeError(msg)
        policies.append(policy)
    return tuple(policies)


def retry_on_status(*status_codes: int) -> ShouldRetry:
    """Create a predicate matching responses with the given status codes.

    Transport errors never match.

    Example:
        ```pycon
        >>> import httpx
        >>> from fluentclient.retry import retry_on_status
        >>> predicate = retry_on_status(502, 503)
        >>> predicate(httpx.Response(503), None), predicate(httpx.Response(404), None)
        (True, False)

        ```
    """
    codes = frozenset(status_codes)

    def _should_retry(response: httpx.Response | None, error: Exception | None) -> bool:  # noqa: ARG001
        return response is not None and response.status_code in codes

    return _should_retry


def is_transient(response: httpx.Response | None, error: Exception | None) -> bool:
    """Return whether an outcome looks like a transient failure.

    Transient failures are responses with a status code in
    ``RETRY_STATUS_CODES`` and transport errors (connection failures,
    timeouts, etc.).
    """
    if response is not None:
        return response.status_code in RETRY_STATUS_CODES
    return isinstance(error, httpx.TransportError)
