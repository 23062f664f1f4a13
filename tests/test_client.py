import threading

import pytest

from conftest import ACCESS_TOKEN, FakeSession, make_response, payment_json
from mpago import (
    ApiError,
    ClientConfig,
    ConstructionError,
    MercadoPagoClient,
    MercadoPagoClientBuilder,
    PaymentCreateOptions,
)


def test_builder_builds_a_client():
    session = FakeSession()
    client = (
        MercadoPagoClientBuilder.builder(ACCESS_TOKEN)
        .with_base_url("https://sandbox.example.com/")
        .with_timeout(3)
        .with_session(session)
        .build()
    )

    assert client.base_url == "https://sandbox.example.com"
    assert client.timeout_seconds == 3
    assert client.session is session


@pytest.mark.parametrize("token", [None, "", "  "])
def test_missing_token_fails_at_build_time(token):
    with pytest.raises(ConstructionError) as excinfo:
        MercadoPagoClientBuilder.builder(token).build()

    assert excinfo.value.reason == "missing_token"


def test_invalid_base_url():
    with pytest.raises(ConstructionError) as excinfo:
        MercadoPagoClient(ACCESS_TOKEN, "api.mercadopago.com")

    assert excinfo.value.reason == "invalid_base_url"


@pytest.mark.parametrize("timeout", [0, -1, None, "soon", True, float("nan")])
def test_invalid_timeout(timeout, session):
    with pytest.raises(ConstructionError) as excinfo:
        MercadoPagoClient(ACCESS_TOKEN, timeout_seconds=timeout, session=session)

    assert excinfo.value.reason == "invalid_timeout"


def test_numeric_timeout_string_is_accepted(session):
    client = MercadoPagoClient(ACCESS_TOKEN, timeout_seconds="10", session=session)

    assert client.timeout_seconds == 10.0


@pytest.mark.parametrize("pool_maxsize", [0, "4", 2.5, True])
def test_invalid_pool_maxsize(pool_maxsize, session):
    with pytest.raises(ConstructionError) as excinfo:
        MercadoPagoClient(ACCESS_TOKEN, session=session, pool_maxsize=pool_maxsize)

    assert excinfo.value.reason == "invalid_pool_size"


def test_credentials_are_read_only(client):
    with pytest.raises(AttributeError):
        client.base_url = "https://evil.example.com"
    with pytest.raises(AttributeError):
        client.credentials.access_token = "other"
    assert ACCESS_TOKEN not in repr(client)


def test_from_config(session):
    config = ClientConfig(access_token=ACCESS_TOKEN, base_url="http://localhost:1", timeout_seconds=2.5)

    client = MercadoPagoClient.from_config(config, session=session)

    assert client.base_url == "http://localhost:1"
    assert client.timeout_seconds == 2.5


def test_check_credentials(client, session):
    session.queue(200, [{"id": "pix", "name": "PIX"}])

    assert client.check_credentials() is None
    assert session.calls[0].url == "https://api.mercadopago.com/v1/payment_methods"


def test_check_credentials_rejected(client, session):
    session.queue(401, {"message": "invalid access token", "error": "unauthorized", "status": 401, "cause": []})

    with pytest.raises(ApiError) as excinfo:
        client.check_credentials()

    assert excinfo.value.code == "unauthorized"


def test_two_clients_keep_their_own_tokens():
    first_session, second_session = FakeSession().queue(200, []), FakeSession().queue(200, [])

    MercadoPagoClient("TEST-first", session=first_session).check_credentials()
    MercadoPagoClient("TEST-second", session=second_session).check_credentials()

    assert first_session.calls[0].headers["Authorization"] == "Bearer TEST-first"
    assert second_session.calls[0].headers["Authorization"] == "Bearer TEST-second"


def test_injected_session_is_not_closed(session):
    with MercadoPagoClient(ACCESS_TOKEN, session=session):
        pass

    assert not session.closed


def test_owned_session_is_closed(monkeypatch):
    session = FakeSession()
    monkeypatch.setattr("mpago.client.build_session", lambda pool_maxsize: session)

    with MercadoPagoClient(ACCESS_TOKEN, pool_maxsize=4):
        pass

    assert session.closed


class ThreadSafeSession(FakeSession):
    def __init__(self):
        super().__init__()
        self.lock = threading.Lock()

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        with self.lock:
            self.calls.append(headers["X-Idempotency-Key"])
        return make_response(201, payment_json())


def test_concurrent_creates_share_one_client():
    session = ThreadSafeSession()
    client = MercadoPagoClient(ACCESS_TOKEN, session=session)
    errors = []

    def create():
        try:
            client.create_payment(PaymentCreateOptions(transaction_amount=10))
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=create) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(session.calls) == 8
    assert len(set(session.calls)) == 8
