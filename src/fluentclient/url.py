r"""Compose the final URL of a request from a base URL and a resource."""

from __future__ import annotations

__all__ = ["resolve_url"]

import httpx

from fluentclient.exceptions import FormatError


def _parse_absolute(resource: str) -> httpx.URL | None:
    try:
        url = httpx.URL(resource)
    except httpx.InvalidURL:
        return None
    if url.is_absolute_url and url.scheme != "file":
        return url
    return None


def resolve_url(base_url: httpx.URL | str | None, resource: str | None) -> httpx.URL | None:
    """Resolve the final URL of a request.

    The rules are applied in order:

    1. an empty resource returns the base URL unchanged;
    2. an absolute (non-file) resource wins over the base URL;
    3. a relative resource without base URL is an error;
    4. a fragment resource, or a base URL with a fragment, is appended
       literally;
    5. a query string resource (``?...`` or ``&...``) is appended literally
       once checked against the query string of the base URL;
    6. anything else is a path resolved against the base URL, whose path
       always ends with ``/`` first so its last segment is kept.

    Args:
        base_url: The base URL, or ``None``.
        resource: The requested resource, or ``None`` to use the base URL.

    Returns:
        The final URL, or ``None`` if both inputs are empty.

    Raises:
        FormatError: If the resource is relative and there is no base URL,
            or if a query string resource conflicts with the base URL.

    Example:
        ```pycon
        >>> from fluentclient.url import resolve_url
        >>> str(resolve_url("https://example.org/api", "users/5"))
        'https://example.org/api/users/5'
        >>> str(resolve_url("https://example.org/api?key=1", "&page=2"))
        'https://example.org/api?key=1&page=2'
        >>> str(resolve_url("https://example.org/api", "https://other.org/x"))
        'https://other.org/x'

        ```
    """
    if isinstance(base_url, str):
        base_url = httpx.URL(base_url)

    if resource is None or not resource.strip():
        return base_url
    absolute_url = _parse_absolute(resource)
    if absolute_url is not None:
        return absolute_url

    if base_url is None:
        msg = f"Can't use relative URL '{resource}' because no base URL was specified."
        raise FormatError(msg)

    resource = resource.strip()

    if base_url.fragment or resource.startswith("#"):
        return httpx.URL(str(base_url) + resource)

    if resource.startswith(("?", "&")):
        base_has_query = bool(base_url.query)
        if base_has_query and resource.startswith("?"):
            msg = (
                f"Can't add resource name '{resource}' to base URL '{base_url}' because "
                "the latter already has a query string."
            )
            raise FormatError(msg)
        if not base_has_query and resource.startswith("&"):
            msg = (
                f"Can't add resource name '{resource}' to base URL '{base_url}' because "
                "the latter doesn't have a query string."
            )
            raise FormatError(msg)
        return httpx.URL(str(base_url) + resource)

    if not base_url.path.endswith("/"):
        base_url = base_url.copy_with(path=base_url.path + "/")
    return base_url.join(resource)
