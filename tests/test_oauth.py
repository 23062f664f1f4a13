import json

import pytest
import requests

from conftest import FakeSession
from mpago import ApiError, OAuth, TransportError, ValidationError

TOKEN_RESPONSE = {
    "access_token": "APP_USR-4934588586838432-XXXXXXXX-241983636",
    "token_type": "bearer",
    "expires_in": 15552000,
    "scope": "offline_access read write",
    "user_id": 241983636,
    "refresh_token": "TG-XXXXXXXX-241983636",
    "public_key": "APP_USR-d0a26210-XXXXXXXX-479f0400869e",
    "live_mode": True,
}


def test_create_access():
    session = FakeSession().queue(200, TOKEN_RESPONSE)

    token = OAuth.create_access(
        "8971239781",
        "client-secret",
        "TG-817289123-241983636",
        "https://someniceurl.com/mercadopago/",
        session=session,
    )

    assert token.access_token == TOKEN_RESPONSE["access_token"]
    assert token.user_id == 241983636
    assert token.live_mode is True
    assert TOKEN_RESPONSE["access_token"] not in repr(token)
    assert TOKEN_RESPONSE["refresh_token"] not in repr(token)

    call = session.calls[0]
    assert call.url == "https://api.mercadopago.com/oauth/token"
    assert "Authorization" not in call.headers
    assert json.loads(call.data) == {
        "grant_type": "authorization_code",
        "client_id": "8971239781",
        "client_secret": "client-secret",
        "code": "TG-817289123-241983636",
        "redirect_uri": "https://someniceurl.com/mercadopago/",
    }


def test_refresh_access():
    session = FakeSession().queue(200, TOKEN_RESPONSE)

    OAuth.refresh_access("8971239781", "client-secret", "TG-78293722-241983636", session=session)

    assert session.calls[0].json["grant_type"] == "refresh_token"
    assert session.calls[0].json["refresh_token"] == "TG-78293722-241983636"


def test_rejected_grant():
    session = FakeSession().queue(
        400, {"error": "invalid_grant", "message": "invalid_grant", "status": 400, "cause": []}
    )

    with pytest.raises(ApiError) as excinfo:
        OAuth.refresh_access("1", "client-secret", "TG-used", session=session)

    assert excinfo.value.code == "invalid_grant"


def test_missing_arguments():
    with pytest.raises(ValidationError) as excinfo:
        OAuth.create_access("", "secret", "", "not a url", session=FakeSession())

    assert set(excinfo.value.fields) == {"client_id", "code", "redirect_uri"}


def test_network_error_does_not_echo_the_secret():
    session = FakeSession().fail_with(requests.exceptions.ConnectionError("connection refused"))

    with pytest.raises(TransportError) as excinfo:
        OAuth.refresh_access("1", "very-secret-value", "TG-1", session=session)

    assert "very-secret-value" not in str(excinfo.value)
