"""Pytest fixtures: a client wired to an in-memory HTTP session."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pytest
import requests

from mpago import MercadoPagoClient

ACCESS_TOKEN = "TEST-1234567890-secret-token"


def make_response(status: int, body: Any = None, headers: Optional[Dict[str, str]] = None) -> requests.Response:
    """Build a real ``requests.Response`` with the given status and body."""
    response = requests.Response()
    response.status_code = status
    if body is None:
        content = b""
    elif isinstance(body, bytes):
        content = body
    elif isinstance(body, str):
        content = body.encode("utf-8")
    else:
        content = json.dumps(body).encode("utf-8")
    response._content = content
    response.headers.update(headers or {"Content-Type": "application/json"})
    return response


@dataclass
class RecordedCall:
    method: str
    url: str
    params: Optional[Dict[str, str]]
    data: Optional[bytes]
    headers: Dict[str, str]
    timeout: Any

    @property
    def json(self) -> Any:
        return None if self.data is None else json.loads(self.data)


class FakeSession:
    """Stands in for ``requests.Session``; replays queued responses or exceptions."""

    def __init__(self) -> None:
        self.outcomes: List[Any] = []
        self.calls: List[RecordedCall] = []
        self.closed = False

    def queue(self, status: int, body: Any = None, headers: Optional[Dict[str, str]] = None) -> "FakeSession":
        self.outcomes.append(make_response(status, body, headers))
        return self

    def fail_with(self, exc: Exception) -> "FakeSession":
        self.outcomes.append(exc)
        return self

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        self.calls.append(
            RecordedCall(
                method=method,
                url=url,
                params=params,
                data=data,
                headers=dict(headers or {}),
                timeout=timeout,
            )
        )
        if not self.outcomes:
            raise AssertionError(f"Unexpected request: {method} {url}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


def payment_json(**overrides: Any) -> Dict[str, Any]:
    data = {
        "id": 1316782591,
        "status": "pending",
        "status_detail": "pending_waiting_transfer",
        "transaction_amount": 100.5,
        "currency_id": "BRL",
        "payment_method_id": "pix",
        "payment_type_id": "bank_transfer",
        "date_created": "2024-01-01T10:00:00.000-04:00",
        "date_of_expiration": "2024-01-02T10:00:00.000-04:00",
        "description": "",
        "live_mode": False,
        "payer": {"id": "123", "email": "test_user@testmail.com"},
        "metadata": {},
        "fee_details": [],
        "point_of_interaction": {
            "type": "PIX",
            "transaction_data": {"qr_code": "00020126...", "ticket_url": "https://mpago.la/pix"},
        },
    }
    data.update(overrides)
    return data


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> MercadoPagoClient:
    return MercadoPagoClient(ACCESS_TOKEN, session=session)
