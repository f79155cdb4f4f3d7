r"""Parameter validation utilities for the client and retry policies.

This module provides validation functions to ensure timeouts, delays,
and retry limits meet their constraints before they are used.
"""

from __future__ import annotations

__all__ = [
    "to_seconds",
    "validate_delay",
    "validate_max_attempts",
    "validate_max_retries",
    "validate_timeout",
]

import math
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from fluentclient.utils.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_max_retries(max_retries: int) -> None:
    """Validate the maximum number of retries of a policy.

    Args:
        max_retries: Maximum number of retries. Must be >= 0. A value
            of 0 means the request is never retried.

    Raises:
        ValueError: If ``max_retries`` is negative.
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)


def validate_max_attempts(max_attempts: int | None) -> None:
    """Validate the optional ceiling on dispatch attempts.

    Args:
        max_attempts: Maximum number of dispatches, or ``None`` for no
            ceiling. Must be >= 1 if provided.

    Raises:
        ValueError: If ``max_attempts`` is lower than 1.
    """
    if max_attempts is not None and max_attempts < 1:
        msg = f"max_attempts must be >= 1, got {max_attempts}"
        raise ValueError(msg)


def to_seconds(delay: float | timedelta) -> float:
    """Convert a delay to a number of seconds.

    Args:
        delay: The delay in seconds or as a ``timedelta``.

    Returns:
        The delay in seconds.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from fluentclient.utils.validation import to_seconds
        >>> to_seconds(timedelta(milliseconds=250))
        0.25
        >>> to_seconds(2)
        2.0

        ```
    """
    if isinstance(delay, timedelta):
        return delay.total_seconds()
    return float(delay)


def validate_delay(delay: float | timedelta) -> float:
    """Validate a delay and return it in seconds.

    Args:
        delay: The delay in seconds or as a ``timedelta``.

    Returns:
        The delay in seconds.

    Raises:
        ValueError: If the delay is negative or not finite.
    """
    seconds = to_seconds(delay)
    if not math.isfinite(seconds):
        msg = f"delay must be finite, got {seconds}"
        raise ValueError(msg)
    if seconds < 0:
        msg = f"delay must be non-negative, got {seconds}"
        raise ValueError(msg)
    return seconds
