"""
Core primitives shared by every API family: configuration, the error
taxonomy, option helpers, the transport and the response resolver.
"""

from .builder import RequestBuilder, RequestSender
from .config import (
    API_BASE_URL,
    DEFAULT_POOL_MAXSIZE,
    DEFAULT_TIMEOUT_SECONDS,
    ClientConfig,
    load_client_config,
)
from .environment import ClientEnvironment, build_environment, read_env_file
from .errors import (
    ApiError,
    BuilderConsumedError,
    ConstructionError,
    ErrorCause,
    MalformedError,
    MalformedResponseError,
    MalformedSuccess,
    MercadoPagoError,
    ResponseError,
    ServerError,
    TransportError,
    TransportErrorKind,
    ValidationError,
)
from .options import FieldChecker, currency_decimals, merge_with_defaults, to_payload, to_query
from .resolver import parse_api_error, resolve
from .transport import (
    IDEMPOTENCY_HEADER,
    Credentials,
    RawResponse,
    Transport,
    ValidatedRequest,
    build_session,
    new_idempotency_key,
)

__all__ = [
    "API_BASE_URL",
    "ApiError",
    "BuilderConsumedError",
    "ClientConfig",
    "ClientEnvironment",
    "ConstructionError",
    "Credentials",
    "DEFAULT_POOL_MAXSIZE",
    "DEFAULT_TIMEOUT_SECONDS",
    "ErrorCause",
    "FieldChecker",
    "IDEMPOTENCY_HEADER",
    "MalformedError",
    "MalformedResponseError",
    "MalformedSuccess",
    "MercadoPagoError",
    "RawResponse",
    "RequestBuilder",
    "RequestSender",
    "ResponseError",
    "ServerError",
    "Transport",
    "TransportError",
    "TransportErrorKind",
    "ValidatedRequest",
    "ValidationError",
    "build_environment",
    "build_session",
    "currency_decimals",
    "load_client_config",
    "merge_with_defaults",
    "new_idempotency_key",
    "parse_api_error",
    "read_env_file",
    "resolve",
    "to_payload",
    "to_query",
]
