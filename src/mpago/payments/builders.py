"""
Request builders for the payment endpoints.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, Optional, Union

from ..common import MAX_PAGE_LIMIT, CurrencyId, SearchBuilder
from ..core.builder import RequestBuilder
from ..core.options import FieldChecker, merge_with_defaults, to_payload
from ..core.transport import ValidatedRequest, new_idempotency_key
from ..payer import Payer, check_payer
from .types import (
    CARD_PAYMENT_METHODS,
    AdditionalInfo,
    Amount,
    Payment,
    PaymentCreateOptions,
    PaymentMethodId,
    PaymentSearchCriteria,
    PaymentSearchOptions,
    PaymentSearchRange,
    PaymentSearchSort,
    PaymentStatus,
    PaymentSummary,
    PaymentUpdateOptions,
    ProductItem,
    default_payment_create_options,
)

__all__ = [
    "PaymentCreateBuilder",
    "PaymentGetBuilder",
    "PaymentSearchBuilder",
    "PaymentUpdateBuilder",
]

_USE_DEFAULTS: Any = object()


def _check_payment_id(checker: FieldChecker, payment_id: Any) -> Optional[int]:
    if isinstance(payment_id, str) and payment_id.strip().isdigit():
        payment_id = int(payment_id.strip())
    return checker.integer("payment_id", payment_id, minimum=1, required=True)


def _check_additional_info(
    checker: FieldChecker,
    info: Optional[AdditionalInfo],
    currency: Optional[CurrencyId],
) -> None:
    if info is None:
        return
    for index, item in enumerate(info.items or []):
        prefix = f"additional_info.items[{index}]"
        item.unit_price = checker.amount(f"{prefix}.unit_price", item.unit_price, currency=currency)
        item.quantity = checker.integer(f"{prefix}.quantity", item.quantity, minimum=1)


class PaymentCreateBuilder(RequestBuilder[Payment]):
    """
    Creates a payment.

    Example::

        payment = PaymentCreateBuilder(
            PaymentCreateOptions(
                transaction_amount=Decimal("25.00"),
                description="Some product",
                payer=Payer(email="test_user@testmail.com"),
            )
        ).add_items([ProductItem(id="1", title="Some product", quantity=1, unit_price="25.00")]).send(client)

    Unset fields are filled from :func:`default_payment_create_options`
    (``installments=1``, ``payment_method_id=pix``). Every build gets a fresh
    idempotency key unless one is pinned with ``idempotency_key``.
    """

    operation = "payments.create"

    def __init__(
        self,
        options: Optional[PaymentCreateOptions] = None,
        *,
        defaults: Optional[PaymentCreateOptions] = _USE_DEFAULTS,
        currency: Optional[Union[CurrencyId, str]] = None,
        idempotency_key: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.options = copy.deepcopy(options) if options is not None else PaymentCreateOptions()
        self.defaults = default_payment_create_options() if defaults is _USE_DEFAULTS else defaults
        self.currency = currency
        self.idempotency_key = idempotency_key

    @classmethod
    def create(
        cls,
        description: str,
        payer: Payer,
        payment_method_id: Union[PaymentMethodId, str],
        transaction_amount: Amount,
    ) -> "PaymentCreateBuilder":
        return cls(
            PaymentCreateOptions(
                transaction_amount=transaction_amount,
                description=description,
                payer=payer,
                payment_method_id=payment_method_id,
            )
        )

    def _additional_info(self) -> AdditionalInfo:
        if self.options.additional_info is None:
            self.options.additional_info = AdditionalInfo()
        return self.options.additional_info

    def set_items(self, items: Iterable[ProductItem]) -> "PaymentCreateBuilder":
        """Replace ``additional_info.items``."""
        self._ensure_unconsumed()
        self._additional_info().items = list(items)
        return self

    def add_items(self, items: Iterable[ProductItem]) -> "PaymentCreateBuilder":
        """Append to ``additional_info.items``."""
        self._ensure_unconsumed()
        info = self._additional_info()
        info.items = list(info.items or []) + list(items)
        return self

    def build(self) -> ValidatedRequest:
        checker = FieldChecker(self.operation)
        currency = checker.enum("currency", self.currency, CurrencyId)
        options = merge_with_defaults(self.options, self.defaults)

        options.transaction_amount = checker.amount(
            "transaction_amount", options.transaction_amount, currency=currency, required=True
        )
        options.application_fee = checker.amount(
            "application_fee", options.application_fee, currency=currency
        )
        options.coupon_amount = checker.amount("coupon_amount", options.coupon_amount, currency=currency)
        options.payment_method_id = checker.enum(
            "payment_method_id", options.payment_method_id, PaymentMethodId
        )
        options.installments = checker.integer("installments", options.installments, minimum=1)
        options.date_of_expiration = checker.timestamp("date_of_expiration", options.date_of_expiration)
        options.notification_url = checker.url("notification_url", options.notification_url)
        options.callback_url = checker.url("callback_url", options.callback_url)
        check_payer(checker, options.payer)
        _check_additional_info(checker, options.additional_info, currency)

        method = options.payment_method_id
        if method is not None and method not in CARD_PAYMENT_METHODS:
            card_only = [name for name in ("token", "issuer_id") if getattr(options, name) is not None]
            if options.installments is not None and options.installments > 1:
                card_only.append("installments")
            for name in card_only:
                checker.add(name, f"is only valid for card payment methods, not '{method.value}'")
            if card_only:
                checker.add("payment_method_id", f"conflicts with {', '.join(card_only)}")

        checker.raise_for_problems()
        return ValidatedRequest(
            operation=self.operation,
            method="POST",
            path="/v1/payments",
            payload=to_payload(options),
            idempotency_key=self.idempotency_key or new_idempotency_key(),
        )

    def parse(self, data: Any) -> Payment:
        return Payment.from_dict(data)


class PaymentGetBuilder(RequestBuilder[Payment]):
    operation = "payments.get"

    def __init__(self, payment_id: Union[int, str]) -> None:
        super().__init__()
        self.payment_id = payment_id

    def build(self) -> ValidatedRequest:
        checker = FieldChecker(self.operation)
        payment_id = _check_payment_id(checker, self.payment_id)
        checker.raise_for_problems()
        return ValidatedRequest(
            operation=self.operation,
            method="GET",
            path=f"/v1/payments/{payment_id}",
        )

    def parse(self, data: Any) -> Payment:
        return Payment.from_dict(data)


class PaymentUpdateBuilder(RequestBuilder[Payment]):
    """Updates a payment. At least one field of the options must be set."""

    operation = "payments.update"

    def __init__(self, payment_id: Union[int, str], options: PaymentUpdateOptions) -> None:
        super().__init__()
        self.payment_id = payment_id
        self.options = copy.deepcopy(options)

    @classmethod
    def cancel(cls, payment_id: Union[int, str]) -> "PaymentUpdateBuilder":
        return cls(payment_id, PaymentUpdateOptions(status=PaymentStatus.CANCELLED))

    @classmethod
    def capture(
        cls,
        payment_id: Union[int, str],
        transaction_amount: Optional[Amount] = None,
    ) -> "PaymentUpdateBuilder":
        """Capture a previously authorized payment, optionally for a smaller amount."""
        return cls(payment_id, PaymentUpdateOptions(capture=True, transaction_amount=transaction_amount))

    def build(self) -> ValidatedRequest:
        checker = FieldChecker(self.operation)
        payment_id = _check_payment_id(checker, self.payment_id)
        options = copy.deepcopy(self.options)

        options.status = checker.enum("status", options.status, PaymentStatus)
        options.transaction_amount = checker.amount("transaction_amount", options.transaction_amount)
        options.date_of_expiration = checker.timestamp("date_of_expiration", options.date_of_expiration)

        payload = to_payload(options)
        if not payload and not checker.problems:
            checker.add("capture", "at least one field must be set")
            checker.add("date_of_expiration", "at least one field must be set")
            checker.add("status", "at least one field must be set")
            checker.add("transaction_amount", "at least one field must be set")

        checker.raise_for_problems()
        return ValidatedRequest(
            operation=self.operation,
            method="PUT",
            path=f"/v1/payments/{payment_id}",
            payload=payload,
        )

    def parse(self, data: Any) -> Payment:
        return Payment.from_dict(data)


class PaymentSearchBuilder(SearchBuilder[PaymentSummary]):
    """Searches payments. ``begin_date``/``end_date`` need ``range`` to be set."""

    operation = "payments.search"
    path = "/v1/payments/search"

    def __init__(self, options: Optional[PaymentSearchOptions] = None) -> None:
        super().__init__(options if options is not None else PaymentSearchOptions())

    def validated_options(self) -> PaymentSearchOptions:
        checker = FieldChecker(self.operation)
        options = copy.deepcopy(self.options)
        options.sort = checker.enum("sort", options.sort, PaymentSearchSort)
        options.criteria = checker.enum("criteria", options.criteria, PaymentSearchCriteria)
        options.range = checker.enum("range", options.range, PaymentSearchRange)
        options.limit = checker.integer("limit", options.limit, minimum=1, maximum=MAX_PAGE_LIMIT)
        options.offset = checker.integer("offset", options.offset, minimum=0)
        options.begin_date = checker.timestamp("begin_date", options.begin_date, allow_relative=True)
        options.end_date = checker.timestamp("end_date", options.end_date, allow_relative=True)
        if options.range is None:
            for name in ("begin_date", "end_date"):
                if getattr(options, name) is not None:
                    checker.add(name, "requires range to be set")
        checker.raise_for_problems()
        return options

    def parse_item(self, data: Any) -> PaymentSummary:
        return PaymentSummary.from_dict(data)
