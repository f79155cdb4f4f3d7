r"""Delay helpers honoring the ``Retry-After`` response header."""

from __future__ import annotations

__all__ = ["honor_retry_after", "parse_retry_after"]

import logging
from contextlib import suppress
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING

from fluentclient.utils.validation import to_seconds

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import timedelta

    import httpx

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(retry_after_header: str | None) -> float | None:
    """Parse the value of a ``Retry-After`` header.

    Both formats of RFC 7231 are supported: a number of seconds
    (e.g. ``"120"``) and an HTTP-date (e.g.
    ``"Wed, 21 Oct 2015 07:28:00 GMT"``). Dates in the past give 0.

    Args:
        retry_after_header: The header value, or ``None`` if absent.

    Returns:
        The number of seconds to wait, or ``None`` if the header is
        absent or cannot be parsed.

    Example:
        ```pycon
        >>> from fluentclient.retry.delays import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after("soon") is None
        True

        ```
    """
    if retry_after_header is None:
        return None

    with suppress(ValueError):
        return max(0.0, float(retry_after_header))

    try:
        retry_date = parsedate_to_datetime(retry_after_header)
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
        return None
    if retry_date.tzinfo is None:
        retry_date = retry_date.replace(tzinfo=timezone.utc)
    return max(0.0, (retry_date - datetime.now(timezone.utc)).total_seconds())


def honor_retry_after(
    get_delay: Callable[[int, httpx.Response | None], float | timedelta],
) -> Callable[[int, httpx.Response | None], float]:
    """Wrap a delay function so the server's ``Retry-After`` wins.

    Args:
        get_delay: The delay function used when the response has no
            parseable ``Retry-After`` header.

    Returns:
        A delay function usable with ``computed_delay``.

    Example:
        ```pycon
        >>> import httpx
        >>> from fluentclient.retry.delays import honor_retry_after
        >>> get_delay = honor_retry_after(lambda attempt, response: 0.5 * attempt)
        >>> get_delay(2, httpx.Response(503, headers={"Retry-After": "7"}))
        7.0
        >>> get_delay(2, httpx.Response(503))
        1.0

        ```
    """

    def _get_delay(attempt: int, response: httpx.Response | None) -> float:
        if response is not None:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            if retry_after is not None:
                return retry_after
        return to_seconds(get_delay(attempt, response))

    return _get_delay
