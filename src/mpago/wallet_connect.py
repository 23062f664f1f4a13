"""
Wallet Connect agreements.

An agreement lets a seller charge a Mercado Pago wallet later on. The user is
sent to ``Agreement.uri`` to approve it and comes back to ``return_url``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .core.builder import RequestBuilder
from .core.options import FieldChecker, to_payload
from .core.resources import extra_fields, optional_str, require_mapping
from .core.transport import ValidatedRequest, new_idempotency_key
from .payments.types import Amount

__all__ = ["Agreement", "AgreementBuilder", "AgreementData", "ExternalUser", "PLATFORM_ID_HEADER"]

PLATFORM_ID_HEADER = "X-Platform-ID"


@dataclass
class AgreementData:
    """The amount the user is asked to validate and what it is for."""

    validation_amount: Optional[Amount] = None
    description: Optional[str] = None


@dataclass
class ExternalUser:
    """How the seller identifies the user. ``description`` may hold the user's name."""

    id: Optional[str] = None
    description: Optional[str] = None


@dataclass
class _AgreementBody:
    return_url: Optional[str] = None
    agreement_data: Optional[AgreementData] = None
    external_flow_id: Optional[str] = None
    external_user: Optional[ExternalUser] = None


@dataclass(frozen=True)
class Agreement:
    agreement_id: str
    agreement_uri: str
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.agreement_id

    @property
    def uri(self) -> str:
        return self.agreement_uri

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Agreement":
        data = require_mapping(data, "agreement")
        agreement_id = optional_str(data["agreement_id"])
        agreement_uri = optional_str(data["agreement_uri"])
        if not agreement_id or not agreement_uri:
            raise ValueError("agreement_id and agreement_uri are required")
        return cls(
            agreement_id=agreement_id,
            agreement_uri=agreement_uri,
            extra=extra_fields(cls, data),
        )


class AgreementBuilder(RequestBuilder[Agreement]):
    """
    Creates a Wallet Connect agreement.

    Example::

        agreement = (
            AgreementBuilder("https://example.com/wallet/return")
            .platform_id("my-platform")
            .external_flow_id("order-42")
            .send(client)
        )
    """

    operation = "wallet_connect.create_agreement"

    def __init__(self, return_url: Optional[str] = None, *, idempotency_key: Optional[str] = None) -> None:
        super().__init__()
        self._body = _AgreementBody(return_url=return_url)
        self._client_id: Optional[str] = None
        self._platform_id: Optional[str] = None
        self.idempotency_key = idempotency_key

    def return_url(self, return_url: str) -> "AgreementBuilder":
        """Where the user lands after approving or denying the agreement."""
        self._ensure_unconsumed()
        self._body.return_url = return_url
        return self

    def client_id(self, client_id: Optional[str]) -> "AgreementBuilder":
        """Application id, sent as the ``client.id`` query parameter."""
        self._ensure_unconsumed()
        self._client_id = client_id
        return self

    def platform_id(self, platform_id: Optional[str]) -> "AgreementBuilder":
        """Sent as the ``X-Platform-ID`` header, e.g. the name of your platform."""
        self._ensure_unconsumed()
        self._platform_id = platform_id
        return self

    def agreement_data(self, agreement_data: Optional[AgreementData]) -> "AgreementBuilder":
        self._ensure_unconsumed()
        self._body.agreement_data = agreement_data
        return self

    def external_flow_id(self, external_flow_id: Optional[str]) -> "AgreementBuilder":
        """Lookup id of your choosing. It is not the agreement id."""
        self._ensure_unconsumed()
        self._body.external_flow_id = external_flow_id
        return self

    def external_user(self, external_user: Optional[ExternalUser]) -> "AgreementBuilder":
        self._ensure_unconsumed()
        self._body.external_user = external_user
        return self

    def build(self) -> ValidatedRequest:
        checker = FieldChecker(self.operation)
        body = _AgreementBody(**vars(self._body))
        body.return_url = checker.url("return_url", body.return_url, required=True)
        if body.agreement_data is not None:
            data = AgreementData(**vars(body.agreement_data))
            data.validation_amount = checker.amount(
                "agreement_data.validation_amount", data.validation_amount, required=True
            )
            checker.require("agreement_data.description", data.description)
            body.agreement_data = data
        if body.external_user is not None:
            checker.require("external_user.id", body.external_user.id)
        checker.raise_for_problems()

        query = {"client.id": self._client_id} if self._client_id else {}
        headers = {PLATFORM_ID_HEADER: self._platform_id} if self._platform_id else {}
        return ValidatedRequest(
            operation=self.operation,
            method="POST",
            path="/v2/wallet_connect/agreements",
            payload=to_payload(body),
            query=query,
            headers=headers,
            idempotency_key=self.idempotency_key or new_idempotency_key(),
        )

    def parse(self, data: Any) -> Agreement:
        return Agreement.from_dict(data)
