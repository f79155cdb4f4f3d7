r"""Options controlling how requests are dispatched and how their
responses are handled.

Options are set at the client level and can be overridden per request.
Every field is optional so that an unset request option falls back to
the client option, and an unset client option falls back to the
default.
"""

from __future__ import annotations

__all__ = ["CompletionMode", "RequestOptions"]

import enum
from dataclasses import dataclass, fields, replace


class CompletionMode(enum.Enum):
    """When dispatching a request should complete."""

    # Wait until the whole response body was read
    CONTENT_READ = "content_read"
    # Return as soon as the response headers were received
    HEADERS_READ = "headers_read"


@dataclass(frozen=True)
class RequestOptions:
    """Options for a request.

    Args:
        ignore_http_errors: Whether HTTP error responses like HTTP 404
            should be returned (``True``) or raised as exceptions
            (``False``). Default ``False``.
        ignore_null_arguments: Whether ``None`` arguments in the query
            string and the JSON body should be dropped (``True``) or sent
            as-is (``False``). Default ``True``.
        complete_when: When to stop waiting for the response. Default
            ``CompletionMode.CONTENT_READ``.

    Example:
        ```pycon
        >>> from fluentclient.options import CompletionMode, RequestOptions
        >>> client_options = RequestOptions(ignore_http_errors=True)
        >>> merged = client_options.merge(RequestOptions(complete_when=CompletionMode.HEADERS_READ))
        >>> merged.should_ignore_http_errors, merged.completion_mode
        (True, <CompletionMode.HEADERS_READ: 'headers_read'>)

        ```
    """

    ignore_http_errors: bool | None = None
    ignore_null_arguments: bool | None = None
    complete_when: CompletionMode | None = None

    def merge(self, other: RequestOptions | None) -> RequestOptions:
        """Create new options where the values set in ``other`` win.

        Args:
            other: The options to apply on top of these ones, or ``None``.

        Returns:
            The merged options. Neither input is modified.
        """
        if other is None:
            return self
        overrides = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **overrides)

    @property
    def should_ignore_http_errors(self) -> bool:
        return bool(self.ignore_http_errors)

    @property
    def should_ignore_null_arguments(self) -> bool:
        return self.ignore_null_arguments is not False

    @property
    def completion_mode(self) -> CompletionMode:
        return self.complete_when or CompletionMode.CONTENT_READ
