r"""Asynchronous context manager client issuing requests with retry
policies, merged options, and URL composition.

The AsyncFluentClient manages the underlying httpx.AsyncClient lifecycle,
resolves request URLs against a base URL, and sends every request
through a ``RetryCoordinator``.
"""

from __future__ import annotations

__all__ = ["AsyncFluentClient"]

import logging
from collections.abc import Mapping
from functools import partial
from typing import TYPE_CHECKING, Any

import httpx

from fluentclient.auth import authorization_value, basic_auth_value, bearer_auth_value
from fluentclient.config import DEFAULT_TIMEOUT
from fluentclient.exceptions import FormatError, HttpErrorResponse
from fluentclient.options import CompletionMode, RequestOptions
from fluentclient.retry.coordinator import RetryCoordinator
from fluentclient.retry.policy import normalize_policies
from fluentclient.snapshot import snapshot_request
from fluentclient.url import resolve_url
from fluentclient.utils.validation import validate_timeout

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType
    from typing import Self

    from fluentclient.cancellation import CancellationToken
    from fluentclient.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


def _drop_null_arguments(arguments: Any) -> Any:
    if isinstance(arguments, Mapping):
        return {key: value for key, value in arguments.items() if value is not None}
    return arguments


class AsyncFluentClient:
    r"""Asynchronous context manager for requests with retry policies.

    Args:
        base_url: Optional base URL that relative resources are resolved
            against.
        options: Default options for all requests.
        retry: Default retry policies for all requests (a policy, a
            sequence of policies, or ``None`` to never retry).
        headers: Default headers for all requests.
        timeout: Maximum seconds to wait for server responses. Must be > 0.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from fluentclient import AsyncFluentClient
        >>> from fluentclient.retry import fixed_intervals, is_transient
        >>> async def main():  # doctest: +SKIP
        ...     retry = fixed_intervals(is_transient, [0.5, 1.0, 2.0])
        ...     async with AsyncFluentClient("https://api.example.com/v1", retry=retry) as client:
        ...         client.set_bearer_authentication("api-key")
        ...         response = await client.get("users", params={"page": 2})
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        base_url: httpx.URL | str | None = None,
        *,
        options: RequestOptions | None = None,
        retry: RetryPolicy | Iterable[RetryPolicy | None] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        validate_timeout(timeout)
        self.base_url = httpx.URL(base_url) if base_url is not None else None
        self.options = options if options is not None else RequestOptions()
        self.retry_policies: tuple[RetryPolicy, ...] = normalize_policies(retry)
        self._headers = httpx.Headers(headers)
        self._timeout = timeout
        self._transport = transport

        # Client will be created when entering context
        self._client: httpx.AsyncClient | None = None
        self._entered = False

    async def __aenter__(self) -> Self:
        self._client = httpx.AsyncClient(
            headers=self._headers, timeout=self._timeout, transport=self._transport
        )
        self._entered = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._entered = False

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure the client is available for use.

        Raises:
            RuntimeError: If the client is used outside of a context manager.
        """
        if not self._entered or self._client is None:
            msg = "AsyncFluentClient must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._client

    def _set_header(self, name: str, value: str) -> None:
        self._headers[name] = value
        if self._client is not None:
            self._client.headers[name] = value

    def set_options(
        self,
        ignore_http_errors: bool | None = None,
        ignore_null_arguments: bool | None = None,
        complete_when: CompletionMode | None = None,
    ) -> Self:
        """Set default options for all requests.

        Only the given values are changed.

        Args:
            ignore_http_errors: Whether HTTP error responses should be
                returned instead of raised.
            ignore_null_arguments: Whether ``None`` arguments should be
                dropped from the query string and JSON body.
            complete_when: When to stop waiting for the response.

        Returns:
            The client, for chaining.
        """
        self.options = self.options.merge(
            RequestOptions(
                ignore_http_errors=ignore_http_errors,
                ignore_null_arguments=ignore_null_arguments,
                complete_when=complete_when,
            )
        )
        return self

    def set_retry_policy(self, retry: RetryPolicy | Iterable[RetryPolicy | None] | None) -> Self:
        """Replace the default retry policies.

        Args:
            retry: A policy, a sequence of policies, or ``None`` to never
                retry.

        Returns:
            The client, for chaining.
        """
        self.retry_policies = normalize_policies(retry)
        return self

    def set_authentication(self, scheme: str, parameter: str) -> Self:
        """Set the default ``Authorization`` header."""
        self._set_header("Authorization", f"{scheme} {parameter}")
        return self

    def set_basic_authentication(self, username: str, password: str) -> Self:
        """Set the default ``Authorization`` header using basic auth."""
        self._set_header("Authorization", basic_auth_value(username, password))
        return self

    def set_bearer_authentication(self, token: str) -> Self:
        """Set the default ``Authorization`` header using a bearer
        token."""
        self._set_header("Authorization", bearer_auth_value(token))
        return self

    def _coordinator_for(
        self,
        retry: RetryPolicy | Iterable[RetryPolicy | None] | None,
        inherit_retry: bool,
    ) -> RetryCoordinator:
        policies = normalize_policies(retry)
        if inherit_retry:
            policies += self.retry_policies
        return RetryCoordinator(policies)

    async def request(
        self,
        method: str,
        resource: str | None = None,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        content: Any = None,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        auth: tuple[str, str] | str | None = None,
        retry: RetryPolicy | Iterable[RetryPolicy | None] | None = None,
        inherit_retry: bool = True,
        options: RequestOptions | None = None,
        cancellation: CancellationToken | None = None,
    ) -> httpx.Response:
        r"""Send an HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH, etc.).
            resource: The resource to request, resolved against the base
                URL, or ``None`` to request the base URL.
            params: Query string arguments.
            json: JSON body.
            content: Raw body (bytes, str, or a byte iterator).
            data: Form body.
            headers: Headers for this request only.
            auth: Credentials for this request only, overriding the
                client's ``Authorization`` header: a ``(username,
                password)`` pair for basic authentication, or a bearer
                token.
            retry: Retry policies for this request. They are evaluated
                before the client's default policies.
            inherit_retry: Whether the client's default policies are
                chained after ``retry``.
            options: Options for this request, merged over the client's.
            cancellation: Optional token aborting the request.

        Returns:
            The response of the last attempt.

        Raises:
            RuntimeError: If called outside of a context manager.
            FormatError: If the URL cannot be resolved.
            SnapshotError: If the request body cannot be buffered.
            TransportError: If the last attempt failed below the HTTP layer.
            HttpErrorResponse: If the last response has an error status
                code and HTTP errors are not ignored.
            RequestCancelledError: If ``cancellation`` is triggered.
        """
        client = self._ensure_client()
        request_options = self.options.merge(options)

        url = resolve_url(self.base_url, resource)
        if url is None:
            msg = "Can't send a request with a null URL."
            raise FormatError(msg)

        if request_options.should_ignore_null_arguments:
            params = _drop_null_arguments(params)
            json = _drop_null_arguments(json)

        if auth is not None:
            headers = httpx.Headers(headers)
            headers["Authorization"] = authorization_value(auth)

        outgoing = client.build_request(
            method,
            url,
            params=params,
            json=json,
            content=content,
            data=data,
            headers=headers,
        )
        snapshot = await snapshot_request(outgoing, request_options)

        stream = request_options.completion_mode is CompletionMode.HEADERS_READ
        coordinator = self._coordinator_for(retry, inherit_retry)
        response = await coordinator.execute(
            snapshot, partial(client.send, stream=stream), cancellation=cancellation
        )

        if response.is_error and not request_options.should_ignore_http_errors:
            logger.debug(f"{method} request to {url} failed with status {response.status_code}")
            raise HttpErrorResponse(
                method=method,
                url=str(url),
                message=f"{method} request to {url} failed with status {response.status_code}",
                status_code=response.status_code,
                response=response,
            )
        return response

    async def get(self, resource: str | None = None, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP GET request.

        Args:
            resource: The resource to request.
            **kwargs: Additional keyword arguments (see request() method).
        """
        return await self.request("GET", resource, **kwargs)

    async def post(self, resource: str | None = None, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP POST request.

        Args:
            resource: The resource to request.
            **kwargs: Additional keyword arguments (see request() method).
        """
        return await self.request("POST", resource, **kwargs)

    async def put(self, resource: str | None = None, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP PUT request.

        Args:
            resource: The resource to request.
            **kwargs: Additional keyword arguments (see request() method).
        """
        return await self.request("PUT", resource, **kwargs)

    async def patch(self, resource: str | None = None, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP PATCH request.

        Args:
            resource: The resource to request.
            **kwargs: Additional keyword arguments (see request() method).
        """
        return await self.request("PATCH", resource, **kwargs)

    async def delete(self, resource: str | None = None, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP DELETE request.

        Args:
            resource: The resource to request.
            **kwargs: Additional keyword arguments (see request() method).
        """
        return await self.request("DELETE", resource, **kwargs)
