r"""fluentclient - HTTP requests with retry policies and replayable bodies.

This package provides a convenience layer over httpx for issuing HTTP
requests with configurable retry behavior, request/response option
merging, and URL composition.

Key Features:
    - Retry policies as plain predicate/delay pairs, chained in order
    - Fixed-intervals and computed-delay policies, Retry-After support
    - Request bodies buffered once and replayed on every attempt
    - Cooperative cancellation of the dispatch and of the wait between attempts
    - Base URL composition for paths, query strings and fragments
    - Client and per-request options (HTTP errors, null arguments, completion)

Example:
    ```pycon
    >>> import asyncio
    >>> from fluentclient import AsyncFluentClient
    >>> from fluentclient.retry import fixed_intervals, retry_on_status
    >>> async def main():  # doctest: +SKIP
    ...     retry = fixed_intervals(retry_on_status(503), [0.1, 0.2])
    ...     async with AsyncFluentClient("https://api.example.com", retry=retry) as client:
    ...         return await client.post("orders", json={"id": 1})
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncFluentClient",
    "CancellationToken",
    "CompletionMode",
    "FluentClientError",
    "FormatError",
    "HttpErrorResponse",
    "HttpRequestError",
    "RequestCancelledError",
    "RequestOptions",
    "RequestSnapshot",
    "RetryCoordinator",
    "RetryPolicy",
    "SnapshotError",
    "TransportError",
    "__version__",
    "computed_delay",
    "fixed_intervals",
    "materialize",
    "resolve_url",
    "snapshot_request",
]

from importlib.metadata import PackageNotFoundError, version

from fluentclient.cancellation import CancellationToken
from fluentclient.client_async import AsyncFluentClient
from fluentclient.exceptions import (
    FluentClientError,
    FormatError,
    HttpErrorResponse,
    HttpRequestError,
    RequestCancelledError,
    SnapshotError,
    TransportError,
)
from fluentclient.options import CompletionMode, RequestOptions
from fluentclient.retry import RetryCoordinator, RetryPolicy, computed_delay, fixed_intervals
from fluentclient.snapshot import RequestSnapshot, materialize, snapshot_request
from fluentclient.url import resolve_url

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
