"""
Payments: create, fetch, update (cancel/capture) and search.
"""

from .builders import (
    PaymentCreateBuilder,
    PaymentGetBuilder,
    PaymentSearchBuilder,
    PaymentUpdateBuilder,
)
from .types import (
    CARD_PAYMENT_METHODS,
    AdditionalInfo,
    FeeDetail,
    OperationType,
    Payment,
    PaymentCreateOptions,
    PaymentMethodId,
    PaymentSearchCriteria,
    PaymentSearchOptions,
    PaymentSearchRange,
    PaymentSearchSort,
    PaymentStatus,
    PaymentStatusDetail,
    PaymentSummary,
    PaymentTypeId,
    PaymentUpdateOptions,
    ProductItem,
    ReceiverAddress,
    Shipments,
    TransactionDetails,
    default_payment_create_options,
)

__all__ = [
    "AdditionalInfo",
    "CARD_PAYMENT_METHODS",
    "FeeDetail",
    "OperationType",
    "Payment",
    "PaymentCreateBuilder",
    "PaymentCreateOptions",
    "PaymentGetBuilder",
    "PaymentMethodId",
    "PaymentSearchBuilder",
    "PaymentSearchCriteria",
    "PaymentSearchOptions",
    "PaymentSearchRange",
    "PaymentSearchSort",
    "PaymentStatus",
    "PaymentStatusDetail",
    "PaymentSummary",
    "PaymentTypeId",
    "PaymentUpdateBuilder",
    "PaymentUpdateOptions",
    "ProductItem",
    "ReceiverAddress",
    "Shipments",
    "TransactionDetails",
    "default_payment_create_options",
]
