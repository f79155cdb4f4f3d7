r"""Helpers building ``Authorization`` header values."""

from __future__ import annotations

__all__ = ["authorization_value", "basic_auth_value", "bearer_auth_value"]

import base64


def basic_auth_value(username: str, password: str) -> str:
    """Build the ``Authorization`` value for basic authentication.

    The credentials are encoded as ASCII; characters outside ASCII are
    replaced with ``?``.

    Example:
        ```pycon
        >>> from fluentclient.auth import basic_auth_value
        >>> basic_auth_value("aladdin", "opensesame")
        'Basic YWxhZGRpbjpvcGVuc2VzYW1l'

        ```
    """
    credentials = f"{username}:{password}".encode("ascii", errors="replace")
    return f"Basic {base64.b64encode(credentials).decode('ascii')}"


def bearer_auth_value(token: str) -> str:
    """Build the ``Authorization`` value for a bearer token.

    Example:
        ```pycon
        >>> from fluentclient.auth import bearer_auth_value
        >>> bearer_auth_value("api-key")
        'Bearer api-key'

        ```
    """
    return f"Bearer {token}"


def authorization_value(auth: tuple[str, str] | str) -> str:
    """Build the ``Authorization`` value for per-request credentials.

    Args:
        auth: A ``(username, password)`` pair for basic authentication,
            or a bearer token.

    Raises:
        TypeError: If ``auth`` is neither a pair nor a string.

    Example:
        ```pycon
        >>> from fluentclient.auth import authorization_value
        >>> authorization_value(("aladdin", "opensesame"))
        'Basic YWxhZGRpbjpvcGVuc2VzYW1l'
        >>> authorization_value("api-key")
        'Bearer api-key'

        ```
    """
    if isinstance(auth, str):
        return bearer_auth_value(auth)
    if isinstance(auth, tuple) and len(auth) == 2:
        return basic_auth_value(*auth)
    msg = f"Expected a (username, password) pair or a bearer token but received {type(auth).__qualname__}"
    raise TypeError(msg)
