from decimal import Decimal

import pytest

from mpago import (
    AutoRecurring,
    Subscription,
    SubscriptionCreateBuilder,
    SubscriptionCreateOptions,
    SubscriptionSearchBuilder,
    SubscriptionSearchOptions,
    ValidationError,
)
from mpago.core.transport import IDEMPOTENCY_HEADER
from mpago.subscriptions import FrequencyType, SubscriptionSemaphore, SubscriptionStatus


def subscription_json(**overrides):
    data = {
        "id": "2c938084726fca480172750000000000",
        "status": "pending",
        "reason": "Gold plan",
        "payer_id": 123456,
        "collector_id": 100200300,
        "application_id": 1234567812345678,
        "back_url": "https://example.com/back",
        "init_point": "https://www.mercadopago.com.br/subscriptions/checkout?preapproval_id=2c93",
        "auto_recurring": {
            "frequency": 1,
            "frequency_type": "months",
            "transaction_amount": 10,
            "currency_id": "BRL",
            "free_trial": None,
        },
        "date_created": "2024-01-01T10:00:00.000-04:00",
        "summarized": {"quotas": 12, "charged_quantity": 0, "semaphore": "green"},
    }
    data.update(overrides)
    return data


def test_create_without_plan(client, session):
    session.queue(201, subscription_json())

    subscription = SubscriptionCreateBuilder.create_without_plan(
        AutoRecurring(transaction_amount=Decimal("10"), currency_id="BRL"),
        "payer@example.com",
        "Gold plan",
        "https://example.com/back",
    ).send(client)

    assert subscription.status is SubscriptionStatus.PENDING
    assert subscription.transaction_amount == Decimal("10")
    assert subscription.summarized.semaphore is SubscriptionSemaphore.GREEN

    call = session.calls[0]
    assert call.url == "https://api.mercadopago.com/preapproval"
    assert call.headers[IDEMPOTENCY_HEADER]
    assert call.json == {
        "back_url": "https://example.com/back",
        "payer_email": "payer@example.com",
        "reason": "Gold plan",
        "auto_recurring": {
            "transaction_amount": 10.0,
            "currency_id": "BRL",
            "frequency": 1,
            "frequency_type": "months",
        },
        "status": "pending",
    }


def test_create_with_plan():
    request = SubscriptionCreateBuilder.create_with_plan(
        "plan-1", "payer@example.com", "card-token", "https://example.com/back"
    ).build()

    assert request.payload["preapproval_plan_id"] == "plan-1"
    assert request.payload["card_token_id"] == "card-token"
    assert request.payload["status"] == "authorized"
    assert "auto_recurring" not in request.payload


def test_plan_and_auto_recurring_are_exclusive():
    options = SubscriptionCreateOptions(
        back_url="https://example.com/back",
        payer_email="payer@example.com",
        preapproval_plan_id="plan-1",
        auto_recurring=AutoRecurring(transaction_amount=10, currency_id="BRL"),
    )

    with pytest.raises(ValidationError) as excinfo:
        SubscriptionCreateBuilder(options).build()

    assert set(excinfo.value.fields) == {"preapproval_plan_id", "auto_recurring"}


def test_plan_requires_card_token():
    options = SubscriptionCreateOptions(
        back_url="https://example.com/back",
        payer_email="payer@example.com",
        preapproval_plan_id="plan-1",
    )

    with pytest.raises(ValidationError) as excinfo:
        SubscriptionCreateBuilder(options).build()

    assert excinfo.value.fields == ("card_token_id",)


def test_required_fields():
    with pytest.raises(ValidationError) as excinfo:
        SubscriptionCreateBuilder(SubscriptionCreateOptions()).build()

    assert set(excinfo.value.fields) == {
        "back_url",
        "payer_email",
        "preapproval_plan_id",
        "auto_recurring",
    }


def test_auto_recurring_amount_uses_its_currency():
    options = SubscriptionCreateOptions(
        back_url="https://example.com/back",
        payer_email="payer@example.com",
        auto_recurring=AutoRecurring(
            transaction_amount="9990.50",
            currency_id="CLP",
            frequency_type=FrequencyType.DAYS,
        ),
    )

    with pytest.raises(ValidationError) as excinfo:
        SubscriptionCreateBuilder(options).build()

    assert excinfo.value.fields == ("auto_recurring.transaction_amount",)


def test_search_subscriptions(client, session):
    session.queue(
        200,
        {"paging": {"total": 1, "limit": 30, "offset": 0}, "results": [subscription_json(status="authorized")]},
    )

    page = client.search_subscriptions(SubscriptionSearchOptions(payer_email="payer@example.com", semaphore="green"))

    assert session.calls[0].url.endswith("/preapproval/search")
    assert session.calls[0].params == {"payer_email": "payer@example.com", "semaphore": "green"}
    assert isinstance(page.results[0], Subscription)
    assert page.results[0].status is SubscriptionStatus.AUTHORIZED


def test_iter_subscriptions_stops_on_empty_page(client, session):
    session.queue(200, {"paging": {"total": 100, "limit": 30, "offset": 0}, "results": [subscription_json()]})
    session.queue(200, {"paging": {"total": 100, "limit": 30, "offset": 30}, "results": []})

    results = list(SubscriptionSearchBuilder(SubscriptionSearchOptions(limit=30)).iter_all(client))

    assert len(results) == 1
    assert len(session.calls) == 2


def test_subscription_without_id_is_malformed():
    with pytest.raises(KeyError):
        Subscription.from_dict({"status": "pending"})
