import logging

import pytest

from conftest import FakeSession, payment_json
from mpago import MercadoPagoClient
from mpago.cli import build_parser, run_cli


@pytest.fixture
def cli_session(monkeypatch, tmp_path):
    for key in (
        "MERCADOPAGO_ACCESS_TOKEN",
        "MERCADOPAGO_BASE_URL",
        "MERCADOPAGO_TIMEOUT_SECONDS",
        "MERCADOPAGO_POOL_MAXSIZE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    session = FakeSession()
    monkeypatch.setattr(
        "mpago.cli.create_client",
        lambda config: MercadoPagoClient.from_config(config, session=session),
    )
    return session


def _run(*args):
    return run_cli(["--set", "MERCADOPAGO_ACCESS_TOKEN=TEST-cli", *args])


def test_check(cli_session):
    cli_session.queue(200, [])

    assert _run("check") == 0
    assert cli_session.calls[0].headers["Authorization"] == "Bearer TEST-cli"


def test_get_payment(cli_session, caplog):
    cli_session.queue(200, payment_json(id=99, status="approved"))

    with caplog.at_level(logging.INFO):
        assert _run("get-payment", "99") == 0

    assert "Payment 99: approved" in caplog.text


def test_cancel_payment(cli_session):
    cli_session.queue(200, payment_json(id=99, status="cancelled"))

    assert _run("cancel-payment", "99") == 0
    assert cli_session.calls[0].json == {"status": "cancelled"}


def test_search_payments_all_pages(cli_session):
    cli_session.queue(200, {"paging": {"total": 2, "limit": 1, "offset": 0}, "results": [payment_json(id=1)]})
    cli_session.queue(200, {"paging": {"total": 2, "limit": 1, "offset": 1}, "results": [payment_json(id=2)]})

    assert _run("search-payments", "--limit", "1", "--all") == 0
    assert [call.params["offset"] for call in cli_session.calls] == ["0", "1"]
    assert cli_session.calls[0].params["sort"] == "date_created"


def test_api_error_exits_non_zero(cli_session, caplog):
    cli_session.queue(404, {"message": "Payment not found", "error": "not_found", "status": 404})

    assert _run("get-payment", "1") == 1
    assert "not_found" in caplog.text


def test_missing_token_exits_non_zero(cli_session):
    assert run_cli(["check"]) == 1
    assert cli_session.calls == []


def test_set_requires_key_value():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--set", "novalue", "check"])
