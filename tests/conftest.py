from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from fluentclient.cancellation import CancellationToken

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


@pytest.fixture
def mock_token_sleep() -> Generator[AsyncMock, None, None]:
    """Patch CancellationToken.sleep to record the waits without
    sleeping."""
    with patch.object(CancellationToken, "sleep", new=AsyncMock(return_value=None)) as mock:
        yield mock


@pytest.fixture
def request_get() -> httpx.Request:
    """Create a GET request without body."""
    return httpx.Request("GET", "https://api.example.com/data")


@pytest.fixture
def make_dispatch() -> Callable[..., AsyncMock]:
    """Create a dispatch function returning or raising the given outcomes
    in order.

    Example:
        >>> def test_dispatch(make_dispatch):
        ...     dispatch = make_dispatch(httpx.Response(503), httpx.Response(200))
    """

    def _make(*outcomes: httpx.Response | Exception) -> AsyncMock:
        return AsyncMock(side_effect=list(outcomes))

    return _make
