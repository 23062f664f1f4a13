"""
Request builders for subscriptions (``/preapproval``).
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from ..common import MAX_PAGE_LIMIT, CurrencyId, SearchBuilder
from ..core.builder import RequestBuilder
from ..core.options import FieldChecker, merge_with_defaults, to_payload
from ..core.transport import ValidatedRequest, new_idempotency_key
from .types import (
    AutoRecurring,
    FrequencyType,
    Subscription,
    SubscriptionCreateOptions,
    SubscriptionSearchOptions,
    SubscriptionSemaphore,
    SubscriptionStatus,
    default_auto_recurring,
)

__all__ = ["SubscriptionCreateBuilder", "SubscriptionSearchBuilder"]


def _check_auto_recurring(checker: FieldChecker, recurring: AutoRecurring) -> None:
    prefix = "auto_recurring"
    recurring.currency_id = checker.enum(
        f"{prefix}.currency_id", recurring.currency_id, CurrencyId, required=True
    )
    recurring.transaction_amount = checker.amount(
        f"{prefix}.transaction_amount",
        recurring.transaction_amount,
        currency=recurring.currency_id,
        required=True,
    )
    recurring.frequency = checker.integer(f"{prefix}.frequency", recurring.frequency, minimum=1)
    recurring.frequency_type = checker.enum(
        f"{prefix}.frequency_type", recurring.frequency_type, FrequencyType
    )
    recurring.start_date = checker.timestamp(f"{prefix}.start_date", recurring.start_date)
    recurring.end_date = checker.timestamp(f"{prefix}.end_date", recurring.end_date)
    trial = recurring.free_trial
    if trial is not None:
        trial.frequency = checker.integer(
            f"{prefix}.free_trial.frequency", trial.frequency, minimum=1, required=True
        )
        trial.frequency_type = checker.enum(
            f"{prefix}.free_trial.frequency_type", trial.frequency_type, FrequencyType, required=True
        )


class SubscriptionCreateBuilder(RequestBuilder[Subscription]):
    """
    Creates a subscription, either from a plan or with its own billing cycle.

    Unset ``auto_recurring`` fields default to a monthly cycle.
    """

    operation = "subscriptions.create"

    def __init__(
        self,
        options: SubscriptionCreateOptions,
        *,
        idempotency_key: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.options = copy.deepcopy(options)
        self.idempotency_key = idempotency_key

    @classmethod
    def create_without_plan(
        cls,
        recurring_info: AutoRecurring,
        payer_email: str,
        reason: str,
        back_url: str,
    ) -> "SubscriptionCreateBuilder":
        return cls(
            SubscriptionCreateOptions(
                auto_recurring=recurring_info,
                back_url=back_url,
                payer_email=payer_email,
                reason=reason,
                status=SubscriptionStatus.PENDING,
            )
        )

    @classmethod
    def create_with_plan(
        cls,
        preapproval_plan_id: str,
        payer_email: str,
        card_token_id: str,
        back_url: str,
    ) -> "SubscriptionCreateBuilder":
        return cls(
            SubscriptionCreateOptions(
                preapproval_plan_id=preapproval_plan_id,
                card_token_id=card_token_id,
                back_url=back_url,
                payer_email=payer_email,
                status=SubscriptionStatus.AUTHORIZED,
            )
        )

    def build(self) -> ValidatedRequest:
        checker = FieldChecker(self.operation)
        options = copy.deepcopy(self.options)

        options.back_url = checker.url("back_url", options.back_url, required=True)
        options.payer_email = checker.email("payer_email", options.payer_email, required=True)
        options.status = checker.enum("status", options.status, SubscriptionStatus)

        plan = options.preapproval_plan_id
        if plan is None and options.auto_recurring is None:
            checker.add("preapproval_plan_id", "either a plan or auto_recurring is required")
            checker.add("auto_recurring", "either a plan or auto_recurring is required")
        elif checker.exclusive(
            ("preapproval_plan_id", "auto_recurring"),
            (plan, options.auto_recurring),
            "a subscription uses either a plan or auto_recurring, not both",
        ):
            if plan is not None:
                checker.require("card_token_id", options.card_token_id)
            else:
                options.auto_recurring = merge_with_defaults(
                    options.auto_recurring, default_auto_recurring()
                )
                _check_auto_recurring(checker, options.auto_recurring)

        checker.raise_for_problems()
        return ValidatedRequest(
            operation=self.operation,
            method="POST",
            path="/preapproval",
            payload=to_payload(options),
            idempotency_key=self.idempotency_key or new_idempotency_key(),
        )

    def parse(self, data: Any) -> Subscription:
        return Subscription.from_dict(data)


class SubscriptionSearchBuilder(SearchBuilder[Subscription]):
    operation = "subscriptions.search"
    path = "/preapproval/search"

    def __init__(self, options: Optional[SubscriptionSearchOptions] = None) -> None:
        super().__init__(options if options is not None else SubscriptionSearchOptions())

    def validated_options(self) -> SubscriptionSearchOptions:
        checker = FieldChecker(self.operation)
        options = copy.deepcopy(self.options)
        options.payer_id = checker.integer("payer_id", options.payer_id, minimum=1)
        options.payer_email = checker.email("payer_email", options.payer_email)
        options.transaction_amount = checker.amount("transaction_amount", options.transaction_amount)
        options.semaphore = checker.enum("semaphore", options.semaphore, SubscriptionSemaphore)
        options.status = checker.enum("status", options.status, SubscriptionStatus)
        options.limit = checker.integer("limit", options.limit, minimum=1, maximum=MAX_PAGE_LIMIT)
        options.offset = checker.integer("offset", options.offset, minimum=0)
        checker.raise_for_problems()
        return options

    def parse_item(self, data: Any) -> Subscription:
        return Subscription.from_dict(data)
