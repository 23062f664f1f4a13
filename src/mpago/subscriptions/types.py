"""
Request options and response resources for ``/preapproval``.

API reference: https://www.mercadopago.com.br/developers/pt/reference/subscriptions/_preapproval/post
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..common import CurrencyId
from ..core.resources import (
    extra_fields,
    open_enum,
    optional_decimal,
    optional_int,
    optional_str,
    optional_timestamp,
    require_decimal,
    require_mapping,
)
from ..payments.types import Amount

__all__ = [
    "AutoRecurring",
    "FreeTrial",
    "FrequencyType",
    "Subscription",
    "SubscriptionCreateOptions",
    "SubscriptionSearchOptions",
    "SubscriptionSemaphore",
    "SubscriptionStatus",
    "SubscriptionSummarized",
    "default_auto_recurring",
]


class FrequencyType(str, Enum):
    DAYS = "days"
    MONTHS = "months"


class SubscriptionStatus(str, Enum):
    PENDING = "pending"
    AUTHORIZED = "authorized"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class SubscriptionSemaphore(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


@dataclass
class FreeTrial:
    frequency: Optional[int] = None
    frequency_type: Optional[Union[FrequencyType, str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FreeTrial":
        data = require_mapping(data, "free_trial")
        return cls(
            frequency=optional_int(data.get("frequency")),
            frequency_type=open_enum(FrequencyType, data.get("frequency_type")),
        )


@dataclass
class AutoRecurring:
    """Billing cycle of a subscription created without a plan."""

    transaction_amount: Optional[Amount] = None
    currency_id: Optional[Union[CurrencyId, str]] = None
    frequency: Optional[int] = None
    frequency_type: Optional[Union[FrequencyType, str]] = None
    start_date: Optional[Union[str, datetime]] = None
    end_date: Optional[Union[str, datetime]] = None
    free_trial: Optional[FreeTrial] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AutoRecurring":
        data = require_mapping(data, "auto_recurring")
        free_trial = data.get("free_trial")
        return cls(
            transaction_amount=optional_decimal(data.get("transaction_amount")),
            currency_id=open_enum(CurrencyId, data.get("currency_id")),
            frequency=optional_int(data.get("frequency")),
            frequency_type=open_enum(FrequencyType, data.get("frequency_type")),
            start_date=optional_timestamp(data.get("start_date")),
            end_date=optional_timestamp(data.get("end_date")),
            free_trial=FreeTrial.from_dict(free_trial) if free_trial else None,
        )


def default_auto_recurring() -> AutoRecurring:
    """Monthly billing, used for unset ``auto_recurring`` fields."""
    return AutoRecurring(frequency=1, frequency_type=FrequencyType.MONTHS)


@dataclass
class SubscriptionCreateOptions:
    """
    Body of ``POST /preapproval``.

    Either ``preapproval_plan_id`` (with ``card_token_id``) or
    ``auto_recurring`` must be given, never both.
    """

    back_url: Optional[str] = None
    payer_email: Optional[str] = None
    reason: Optional[str] = None
    external_reference: Optional[str] = None
    preapproval_plan_id: Optional[str] = None
    card_token_id: Optional[str] = None
    auto_recurring: Optional[AutoRecurring] = None
    status: Optional[Union[SubscriptionStatus, str]] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SubscriptionSearchOptions:
    """Query of ``GET /preapproval/search``."""

    q: Optional[str] = None
    payer_id: Optional[int] = None
    payer_email: Optional[str] = None
    preapproval_plan_id: Optional[str] = None
    transaction_amount: Optional[Amount] = None
    semaphore: Optional[Union[SubscriptionSemaphore, str]] = None
    status: Optional[Union[SubscriptionStatus, str]] = None
    sort: Optional[str] = None
    offset: Optional[int] = None
    limit: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SubscriptionSummarized:
    quotas: Optional[int] = None
    charged_quantity: Optional[int] = None
    pending_charge_quantity: Optional[int] = None
    charged_amount: Optional[Decimal] = None
    pending_charge_amount: Optional[Decimal] = None
    semaphore: Optional[Union[SubscriptionSemaphore, str]] = None
    last_charged_date: Optional[datetime] = None
    last_charged_amount: Optional[Decimal] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubscriptionSummarized":
        data = require_mapping(data, "summarized")
        return cls(
            quotas=optional_int(data.get("quotas")),
            charged_quantity=optional_int(data.get("charged_quantity")),
            pending_charge_quantity=optional_int(data.get("pending_charge_quantity")),
            charged_amount=optional_decimal(data.get("charged_amount")),
            pending_charge_amount=optional_decimal(data.get("pending_charge_amount")),
            semaphore=open_enum(SubscriptionSemaphore, data.get("semaphore")),
            last_charged_date=optional_timestamp(data.get("last_charged_date")),
            last_charged_amount=optional_decimal(data.get("last_charged_amount")),
        )


@dataclass(frozen=True)
class Subscription:
    id: str
    status: Union[SubscriptionStatus, str]
    transaction_amount: Optional[Decimal] = None
    reason: Optional[str] = None
    payer_id: Optional[int] = None
    payer_email: Optional[str] = None
    collector_id: Optional[int] = None
    application_id: Optional[int] = None
    preapproval_plan_id: Optional[str] = None
    external_reference: Optional[str] = None
    back_url: Optional[str] = None
    init_point: Optional[str] = None
    auto_recurring: Optional[AutoRecurring] = None
    card_id: Optional[int] = None
    payment_method_id: Optional[str] = None
    next_payment_date: Optional[datetime] = None
    date_created: Optional[datetime] = None
    last_modified: Optional[datetime] = None
    summarized: Optional[SubscriptionSummarized] = None
    first_invoice_offset: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subscription":
        data = require_mapping(data, "subscription")
        subscription_id = optional_str(data["id"])
        status = open_enum(SubscriptionStatus, data["status"])
        if not subscription_id or status is None:
            raise ValueError("subscription id and status are required")
        auto_recurring = data.get("auto_recurring")
        summarized = data.get("summarized")
        amount = data.get("transaction_amount")
        if amount is None and isinstance(auto_recurring, dict):
            amount = auto_recurring.get("transaction_amount")
        return cls(
            id=subscription_id,
            status=status,
            transaction_amount=None if amount is None else require_decimal(amount),
            reason=optional_str(data.get("reason")),
            payer_id=optional_int(data.get("payer_id")),
            payer_email=optional_str(data.get("payer_email")),
            collector_id=optional_int(data.get("collector_id")),
            application_id=optional_int(data.get("application_id")),
            preapproval_plan_id=optional_str(data.get("preapproval_plan_id")),
            external_reference=optional_str(data.get("external_reference")),
            back_url=optional_str(data.get("back_url")),
            init_point=optional_str(data.get("init_point")),
            auto_recurring=AutoRecurring.from_dict(auto_recurring) if auto_recurring else None,
            card_id=optional_int(data.get("card_id")),
            payment_method_id=optional_str(data.get("payment_method_id")),
            next_payment_date=optional_timestamp(data.get("next_payment_date")),
            date_created=optional_timestamp(data.get("date_created")),
            last_modified=optional_timestamp(data.get("last_modified")),
            summarized=SubscriptionSummarized.from_dict(summarized) if summarized else None,
            first_invoice_offset=optional_int(data.get("first_invoice_offset")),
            extra=extra_fields(cls, data),
        )
