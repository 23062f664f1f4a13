import pytest
import requests

from conftest import ACCESS_TOKEN, FakeSession
from mpago.core.errors import TransportError, TransportErrorKind
from mpago.core.transport import (
    IDEMPOTENCY_HEADER,
    Credentials,
    Transport,
    ValidatedRequest,
    build_session,
)

CREDENTIALS = Credentials(ACCESS_TOKEN)


def _request(**overrides):
    values = {"operation": "payments.create", "method": "POST", "path": "/v1/payments"}
    values.update(overrides)
    return ValidatedRequest(**values)


def test_execute_sends_exactly_one_request():
    session = FakeSession().queue(201, {"id": 1})
    raw = Transport(session, timeout_seconds=5).execute(
        _request(payload={"transaction_amount": 10.0}, idempotency_key="key-1"), CREDENTIALS
    )

    assert raw.status == 201
    assert raw.body == b'{"id": 1}'
    (call,) = session.calls
    assert call.timeout == 5
    assert call.data == b'{"transaction_amount":10.0}'
    assert call.headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
    assert call.headers["Content-Type"] == "application/json"
    assert call.headers["Accept"] == "application/json"
    assert call.headers[IDEMPOTENCY_HEADER] == "key-1"
    assert call.headers["User-Agent"].startswith("mpago-python/")


def test_requests_without_body_have_no_content_type():
    session = FakeSession().queue(200, {})
    Transport(session).execute(_request(method="GET", path="/v1/payments/1"), CREDENTIALS)

    headers = session.calls[0].headers
    assert "Content-Type" not in headers
    assert IDEMPOTENCY_HEADER not in headers


def test_operation_headers_cannot_replace_authorization():
    session = FakeSession().queue(200, {})
    request = _request(headers={"Authorization": "Bearer other", "X-Platform-ID": "shop"})
    Transport(session).execute(request, CREDENTIALS)

    headers = session.calls[0].headers
    assert headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
    assert headers["X-Platform-ID"] == "shop"


def test_custom_base_url():
    session = FakeSession().queue(200, {})
    Transport(session).execute(_request(), Credentials(ACCESS_TOKEN, "http://localhost:8080/"))

    assert session.calls[0].url == "http://localhost:8080/v1/payments"


@pytest.mark.parametrize(
    "exc, kind",
    [
        (requests.exceptions.ConnectTimeout("connect timed out"), TransportErrorKind.TIMEOUT),
        (requests.exceptions.ReadTimeout("read timed out"), TransportErrorKind.TIMEOUT),
        (requests.exceptions.SSLError("certificate verify failed"), TransportErrorKind.TLS),
        (requests.exceptions.ConnectionError("connection refused"), TransportErrorKind.CONNECTION),
        (requests.exceptions.TooManyRedirects("loop"), TransportErrorKind.REQUEST),
    ],
)
def test_network_failures_are_classified(exc, kind):
    session = FakeSession().fail_with(exc)

    with pytest.raises(TransportError) as excinfo:
        Transport(session).execute(_request(), CREDENTIALS)

    assert excinfo.value.kind is kind
    assert excinfo.value.operation == "payments.create"
    assert excinfo.value.__cause__ is exc
    assert len(session.calls) == 1


def test_token_never_leaks_into_transport_errors():
    session = FakeSession().fail_with(
        requests.exceptions.ConnectionError(f"failed with header Bearer {ACCESS_TOKEN}")
    )

    with pytest.raises(TransportError) as excinfo:
        Transport(session).execute(_request(), CREDENTIALS)

    assert ACCESS_TOKEN not in str(excinfo.value)
    assert ACCESS_TOKEN not in repr(excinfo.value.to_dict())


def test_credentials_hide_the_token():
    assert ACCESS_TOKEN not in repr(CREDENTIALS)


def test_build_session_pool_size():
    session = build_session(25)

    adapter = session.get_adapter("https://api.mercadopago.com")
    assert adapter._pool_maxsize == 25
    assert adapter.max_retries.total == 0
