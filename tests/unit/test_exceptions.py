r"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import httpx
import pytest

from fluentclient.exceptions import (
    FluentClientError,
    FormatError,
    HttpErrorResponse,
    HttpRequestError,
    RequestCancelledError,
    SnapshotError,
    TransportError,
)


@pytest.mark.parametrize(
    "exc_type",
    [FormatError, SnapshotError, RequestCancelledError, HttpRequestError, TransportError, HttpErrorResponse],
)
def test_errors_share_base_class(exc_type: type[Exception]) -> None:
    assert issubclass(exc_type, FluentClientError)


def test_format_error_is_value_error() -> None:
    assert issubclass(FormatError, ValueError)


def test_http_request_error_attributes() -> None:
    response = httpx.Response(404)
    error = HttpErrorResponse(
        method="GET",
        url="https://api.example.com/data",
        message="GET request to https://api.example.com/data failed with status 404",
        status_code=404,
        response=response,
    )
    assert str(error) == "GET request to https://api.example.com/data failed with status 404"
    assert error.method == "GET"
    assert error.url == "https://api.example.com/data"
    assert error.status_code == 404
    assert error.response is response
    assert error.__cause__ is None


def test_http_request_error_cause() -> None:
    cause = httpx.ConnectError("refused")
    error = TransportError(method="POST", url="https://x.org", message="failed", cause=cause)
    assert error.__cause__ is cause
    assert error.response is None


def test_http_request_error_repr() -> None:
    error = HttpRequestError(method="GET", url="https://x.org", message="failed", status_code=500)
    assert repr(error) == "HttpRequestError(method='GET', url='https://x.org', status_code=500)"
