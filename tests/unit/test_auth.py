r"""Unit tests for authentication header helpers."""

from __future__ import annotations

import pytest

from fluentclient.auth import authorization_value, basic_auth_value, bearer_auth_value


def test_basic_auth_value() -> None:
    assert basic_auth_value("aladdin", "opensesame") == "Basic YWxhZGRpbjpvcGVuc2VzYW1l"


def test_basic_auth_value_empty_password() -> None:
    assert basic_auth_value("user", "") == "Basic dXNlcjo="


def test_basic_auth_value_non_ascii_replaced() -> None:
    assert basic_auth_value("josé", "pw") == basic_auth_value("jos?", "pw")


def test_bearer_auth_value() -> None:
    assert bearer_auth_value("secret-token") == "Bearer secret-token"


#########################################
#     Tests for authorization_value     #
#########################################


def test_authorization_value_pair() -> None:
    assert authorization_value(("aladdin", "opensesame")) == "Basic YWxhZGRpbjpvcGVuc2VzYW1l"


def test_authorization_value_token() -> None:
    assert authorization_value("secret-token") == "Bearer secret-token"


@pytest.mark.parametrize("auth", [("only-user",), 42])
def test_authorization_value_invalid(auth: object) -> None:
    with pytest.raises(TypeError, match=r"Expected a \(username, password\) pair or a bearer token"):
        authorization_value(auth)
