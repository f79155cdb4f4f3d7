r"""Exception types raised by the fluent HTTP client.

The hierarchy separates errors raised before any request is sent (URL
composition, request buffering) from errors describing the final outcome
of a dispatch (transport failures, HTTP error responses, cancellation).
"""

from __future__ import annotations

__all__ = [
    "FluentClientError",
    "FormatError",
    "HttpErrorResponse",
    "HttpRequestError",
    "RequestCancelledError",
    "SnapshotError",
    "TransportError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class FluentClientError(Exception):
    """Base class for all errors raised by ``fluentclient``."""


class FormatError(FluentClientError, ValueError):
    """Raised when a base URL and a resource cannot be combined.

    Example:
        ```pycon
        >>> from fluentclient.url import resolve_url
        >>> resolve_url(None, "users")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        fluentclient.exceptions.FormatError: Can't use relative URL 'users' because no base URL was specified.

        ```
    """


class SnapshotError(FluentClientError):
    """Raised when a request body cannot be buffered for re-sending."""


class RequestCancelledError(FluentClientError):
    """Raised when a cancellation token is triggered while a request is
    being coordinated."""


class HttpRequestError(FluentClientError):
    """Raised when an HTTP request does not produce a usable response.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        message: The error message.
        status_code: The HTTP status code, if a response was received.
        response: The final response, if one was received.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from fluentclient.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET",
        ...     url="https://api.example.com/data",
        ...     message="GET request to https://api.example.com/data failed with status 404",
        ...     status_code=404,
        ... )
        >>> error.status_code
        404

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response = response
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"status_code={self.status_code})"
        )


class TransportError(HttpRequestError):
    """Raised when a request failed below the HTTP layer (connection
    refused, timeout, etc.) and no retry policy retried it."""


class HttpErrorResponse(HttpRequestError):
    """Raised when the final response has an error status code and HTTP
    errors are not ignored."""
