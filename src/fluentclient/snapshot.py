r"""Replayable captures of outgoing requests.

An ``httpx.Request`` built from a generator or a file streams its body,
so it can only be sent once. ``snapshot_request`` buffers the body into
memory and freezes everything needed to send the request again;
``materialize`` derives a fresh ``httpx.Request`` from the snapshot before
every attempt.
"""

from __future__ import annotations

__all__ = ["RequestSnapshot", "materialize", "snapshot_request"]

import logging
from collections.abc import AsyncIterable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import httpx

from fluentclient.exceptions import SnapshotError
from fluentclient.options import RequestOptions

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestSnapshot:
    """Immutable, re-sendable capture of a request.

    Attributes:
        method: The HTTP method.
        url: The final URL.
        headers: The raw header pairs, in order and with duplicates.
        body: The buffered body (empty if the request has none).
        extensions: The per-request transport extensions (timeout,
            HTTP version hints, etc.).
        options: The client-level options applying to this request.
    """

    method: str
    url: httpx.URL
    headers: tuple[tuple[bytes, bytes], ...]
    body: bytes = b""
    extensions: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    options: RequestOptions = field(default_factory=RequestOptions)


async def snapshot_request(
    request: httpx.Request, options: RequestOptions | None = None
) -> RequestSnapshot:
    """Capture a request so it can be dispatched several times.

    The body is read once and buffered. ``httpx`` keeps the buffered
    content on the original request, so ``request`` stays fully readable
    afterwards.

    Args:
        request: The request to capture.
        options: The client-level options applying to the request.

    Returns:
        The snapshot of the request.

    Raises:
        SnapshotError: If the request body cannot be read.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from fluentclient.snapshot import snapshot_request
        >>> request = httpx.Request("POST", "https://example.org/items", content=b"{}")
        >>> snapshot = asyncio.run(snapshot_request(request))
        >>> snapshot.method, snapshot.body
        ('POST', b'{}')

        ```
    """
    try:
        if isinstance(request.stream, AsyncIterable):
            body = await request.aread()
        else:
            body = request.read()
    except (OSError, httpx.StreamError) as exc:
        msg = f"Can't buffer the body of the {request.method} request to {request.url}: {exc}"
        raise SnapshotError(msg) from exc

    logger.debug(f"Captured {request.method} request to {request.url} ({len(body)} body bytes)")
    return RequestSnapshot(
        method=request.method,
        url=request.url,
        headers=tuple(request.headers.raw),
        body=body,
        extensions=MappingProxyType(dict(request.extensions)),
        options=options if options is not None else RequestOptions(),
    )


def materialize(snapshot: RequestSnapshot) -> httpx.Request:
    """Create a new outgoing request from a snapshot.

    Headers are copied as raw bytes and no header is added or recomputed.
    The body stream starts at the beginning of the buffered content.

    Args:
        snapshot: The snapshot to send.

    Returns:
        A request owned by the caller, independent from any previously
        materialized request.
    """
    return httpx.Request(
        snapshot.method,
        snapshot.url,
        headers=list(snapshot.headers),
        stream=httpx.ByteStream(snapshot.body),
        extensions=dict(snapshot.extensions),
    )
