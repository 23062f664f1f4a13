"""
OAuth token exchange for marketplace integrations.

API reference: https://www.mercadopago.com.br/developers/pt/reference/oauth/_oauth_token/post

These calls authenticate with the application's client secret in the request
body, so they do not need (and never send) a bearer token.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import requests

from .core.config import DEFAULT_TIMEOUT_SECONDS, normalize_base_url
from .core.options import FieldChecker
from .core.resolver import resolve
from .core.resources import extra_fields, optional_bool, optional_int, optional_str, require_mapping
from .core.transport import Transport, ValidatedRequest, build_session

__all__ = ["GrantType", "OAuth", "OAuthToken"]


class GrantType(str, Enum):
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


@dataclass(frozen=True)
class OAuthToken:
    access_token: str = field(repr=False)
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None
    user_id: Optional[int] = None
    refresh_token: Optional[str] = field(default=None, repr=False)
    public_key: Optional[str] = None
    live_mode: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OAuthToken":
        data = require_mapping(data, "oauth token")
        access_token = optional_str(data["access_token"])
        if not access_token:
            raise ValueError("access_token is empty")
        return cls(
            access_token=access_token,
            token_type=optional_str(data.get("token_type")),
            expires_in=optional_int(data.get("expires_in")),
            scope=optional_str(data.get("scope")),
            user_id=optional_int(data.get("user_id")),
            refresh_token=optional_str(data.get("refresh_token")),
            public_key=optional_str(data.get("public_key")),
            live_mode=optional_bool(data.get("live_mode")),
            extra=extra_fields(cls, data),
        )


class OAuth:
    """
    ``POST /oauth/token`` for both grant types.

    Example::

        token = OAuth.create_access(
            "8971239781",
            "RcHGkCg2VTL6cxrxzBSDQydT",
            "TG-817289123-241983636",
            "https://someniceurl.com/mercadopago/",
        )
        client = MercadoPagoClient(token.access_token)
    """

    operation = "oauth.token"
    path = "/oauth/token"

    @classmethod
    def create_access(
        cls,
        client_id: str,
        client_secret: str,
        code: str,
        redirect_uri: str,
        *,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> OAuthToken:
        """Exchange an authorization ``code`` for an access token."""
        checker = FieldChecker(cls.operation)
        checker.require("client_id", client_id)
        checker.require("client_secret", client_secret)
        checker.require("code", code)
        checker.url("redirect_uri", redirect_uri, required=True)
        checker.raise_for_problems()
        payload = {
            "grant_type": GrantType.AUTHORIZATION_CODE.value,
            "client_id": str(client_id),
            "client_secret": client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
        }
        return cls._exchange(payload, session=session, base_url=base_url, timeout_seconds=timeout_seconds)

    @classmethod
    def refresh_access(
        cls,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        *,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> OAuthToken:
        """Trade a refresh token for a new access token. Refresh tokens are single-use."""
        checker = FieldChecker(cls.operation)
        checker.require("client_id", client_id)
        checker.require("client_secret", client_secret)
        checker.require("refresh_token", refresh_token)
        checker.raise_for_problems()
        payload = {
            "grant_type": GrantType.REFRESH_TOKEN.value,
            "client_id": str(client_id),
            "client_secret": client_secret,
            "refresh_token": refresh_token,
        }
        return cls._exchange(payload, session=session, base_url=base_url, timeout_seconds=timeout_seconds)

    @classmethod
    def _exchange(
        cls,
        payload: Dict[str, str],
        *,
        session: Optional[requests.Session],
        base_url: Optional[str],
        timeout_seconds: float,
    ) -> OAuthToken:
        request = ValidatedRequest(
            operation=cls.operation,
            method="POST",
            path=cls.path,
            payload=payload,
        )
        root = normalize_base_url(base_url)
        owned = session is None
        http = build_session(1) if owned else session
        try:
            raw = Transport(http, timeout_seconds=timeout_seconds).execute(request, base_url=root)
        finally:
            if owned:
                http.close()
        return resolve(raw, OAuthToken.from_dict, operation=cls.operation)
