"""
Typed client for the Mercado Pago API.

The package re-exports the pieces most integrations need so they can
``from mpago import ...`` without navigating the subpackages.
"""

from .api import create_client, create_payment
from .client import MercadoPagoClient, MercadoPagoClientBuilder
from .common import CurrencyId, Paging, SearchPage
from .core import (
    ApiError,
    BuilderConsumedError,
    ClientConfig,
    ConstructionError,
    Credentials,
    ErrorCause,
    MalformedError,
    MalformedResponseError,
    MalformedSuccess,
    MercadoPagoError,
    ResponseError,
    ServerError,
    TransportError,
    TransportErrorKind,
    ValidatedRequest,
    ValidationError,
    load_client_config,
)
from .oauth import OAuth, OAuthToken
from .payer import Payer, PayerIdentification
from .payments import (
    Payment,
    PaymentCreateBuilder,
    PaymentCreateOptions,
    PaymentGetBuilder,
    PaymentMethodId,
    PaymentSearchBuilder,
    PaymentSearchOptions,
    PaymentStatus,
    PaymentSummary,
    PaymentUpdateBuilder,
    PaymentUpdateOptions,
    ProductItem,
)
from .subscriptions import (
    AutoRecurring,
    Subscription,
    SubscriptionCreateBuilder,
    SubscriptionCreateOptions,
    SubscriptionSearchBuilder,
    SubscriptionSearchOptions,
)
from .wallet_connect import Agreement, AgreementBuilder, AgreementData, ExternalUser

__version__ = "0.1.0"

__all__ = (
    "Agreement",
    "AgreementBuilder",
    "AgreementData",
    "ApiError",
    "AutoRecurring",
    "BuilderConsumedError",
    "ClientConfig",
    "ConstructionError",
    "Credentials",
    "CurrencyId",
    "ErrorCause",
    "ExternalUser",
    "MalformedError",
    "MalformedResponseError",
    "MalformedSuccess",
    "MercadoPagoClient",
    "MercadoPagoClientBuilder",
    "MercadoPagoError",
    "OAuth",
    "OAuthToken",
    "Paging",
    "Payer",
    "PayerIdentification",
    "Payment",
    "PaymentCreateBuilder",
    "PaymentCreateOptions",
    "PaymentGetBuilder",
    "PaymentMethodId",
    "PaymentSearchBuilder",
    "PaymentSearchOptions",
    "PaymentStatus",
    "PaymentSummary",
    "PaymentUpdateBuilder",
    "PaymentUpdateOptions",
    "ProductItem",
    "ResponseError",
    "SearchPage",
    "ServerError",
    "Subscription",
    "SubscriptionCreateBuilder",
    "SubscriptionCreateOptions",
    "SubscriptionSearchBuilder",
    "SubscriptionSearchOptions",
    "TransportError",
    "TransportErrorKind",
    "ValidatedRequest",
    "ValidationError",
    "create_client",
    "create_payment",
    "load_client_config",
)
