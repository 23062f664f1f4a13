from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

import pytest

from mpago.core.errors import ValidationError
from mpago.core.options import (
    FieldChecker,
    currency_decimals,
    merge_with_defaults,
    to_payload,
    to_query,
)
from mpago.payer import Payer, PayerIdentification
from mpago.payments import PaymentCreateOptions, PaymentMethodId, default_payment_create_options


@dataclass
class Inner:
    a: Optional[int] = None
    b: Optional[int] = None


@dataclass
class Outer:
    name: Optional[str] = None
    inner: Optional[Inner] = None
    flag: Optional[bool] = None
    when: Optional[datetime] = None
    amount: Optional[Decimal] = field(default=None, metadata={"wire": "amount_value"})
    extra: Dict[str, Any] = field(default_factory=dict)


def test_to_payload_omits_unset_fields():
    assert to_payload(Outer(name="x")) == {"name": "x"}


def test_to_payload_serializes_nested_values():
    options = Outer(
        inner=Inner(a=1),
        when=datetime(2024, 1, 1, tzinfo=timezone.utc),
        amount=Decimal("10.50"),
        extra={"custom": [1, 2]},
    )

    assert to_payload(options) == {
        "inner": {"a": 1},
        "when": "2024-01-01T00:00:00.000+00:00",
        "amount_value": 10.5,
        "custom": [1, 2],
    }


def test_to_query_stringifies_values():
    assert to_query(Outer(name="x", flag=False, amount=Decimal("30"))) == {
        "name": "x",
        "flag": "false",
        "amount_value": "30",
    }


def test_merge_caller_fields_win():
    merged = merge_with_defaults(
        Outer(name="caller", inner=Inner(a=1), extra={"k": "caller"}),
        Outer(name="default", inner=Inner(a=9, b=2), flag=True, extra={"k": "default", "d": 1}),
    )

    assert merged.name == "caller"
    assert merged.inner == Inner(a=1, b=2)
    assert merged.flag is True
    assert merged.extra == {"k": "caller", "d": 1}


@pytest.mark.parametrize(
    "field_name, caller_value",
    [
        ("description", "caller description"),
        ("payment_method_id", PaymentMethodId.MASTER),
        ("installments", 6),
    ],
)
def test_merge_never_takes_the_default_for_a_caller_set_field(field_name, caller_value):
    options = PaymentCreateOptions(transaction_amount=1)
    setattr(options, field_name, caller_value)

    merged = merge_with_defaults(options, default_payment_create_options())

    assert getattr(merged, field_name) == caller_value


def test_merge_does_not_touch_inputs():
    options = Outer(inner=Inner(a=1))
    defaults = Outer(inner=Inner(b=2))

    merge_with_defaults(options, defaults)

    assert options.inner == Inner(a=1)
    assert defaults.inner == Inner(b=2)


def test_merge_rejects_mismatched_types():
    with pytest.raises(TypeError):
        merge_with_defaults(Outer(), Inner())


@pytest.mark.parametrize(
    "currency, decimals",
    [(None, 2), ("BRL", 2), ("CLP", 0), ("BTC", 8), ("ETH", 8), ("clp", 0)],
)
def test_currency_decimals(currency, decimals):
    assert currency_decimals(currency) == decimals


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True, "-0.01", "1.001"])
def test_amount_rejections(value):
    checker = FieldChecker("test")

    assert checker.amount("amount", value) is None
    assert "amount" in checker.problems


def test_amount_accepts_crypto_precision():
    checker = FieldChecker("test")

    assert checker.amount("amount", "0.00000001", currency="BTC") == Decimal("0.00000001")
    assert checker.problems == {}


def test_amount_keeps_large_exact_values():
    checker = FieldChecker("test")

    assert checker.amount("amount", "20999999.12345679", currency="BTC") == Decimal("20999999.12345679")
    assert checker.amount("total", "9999999999999.99") == Decimal("9999999999999.99")
    assert checker.problems == {}


def test_amount_rejects_values_a_json_number_would_round():
    checker = FieldChecker("test")

    assert checker.amount("amount", Decimal("123456789012345678.91")) is None
    assert checker.problems == {"amount": "has more significant digits than a JSON number can carry"}


def test_amount_too_large_for_the_decimal_context():
    checker = FieldChecker("test")

    assert checker.amount("amount", "1" + "0" * 40) is None
    assert checker.problems == {"amount": "is too large"}


@pytest.mark.parametrize("value", ["NOW", "NOW-1DAYS", "NOW-3MONTHS", "2024-01-01T00:00:00Z"])
def test_relative_dates_allowed_for_search(value):
    checker = FieldChecker("test")

    assert checker.timestamp("begin_date", value, allow_relative=True) == value
    assert checker.problems == {}


def test_relative_dates_rejected_elsewhere():
    checker = FieldChecker("test")
    checker.timestamp("date_of_expiration", "NOW-1DAYS")

    assert "date_of_expiration" in checker.problems


def test_exclusive_flags_every_present_field():
    checker = FieldChecker("test")

    assert not checker.exclusive(("a", "b", "c"), (1, None, 3), "pick one")
    assert set(checker.problems) == {"a", "c"}


def test_raise_for_problems_names_every_field():
    checker = FieldChecker("payments.create")
    checker.require("payer.identification.number", "")
    checker.enum("payer.identification.type", "XYZ", PaymentMethodId)

    with pytest.raises(ValidationError) as excinfo:
        checker.raise_for_problems()

    assert excinfo.value.fields == ("payer.identification.number", "payer.identification.type")
    assert excinfo.value.to_dict()["fields"] == list(excinfo.value.fields)


def test_nested_payer_payload():
    payer = Payer(
        email="buyer@example.com",
        identification=PayerIdentification(type="CPF", number="19119119100"),
        extra={"phone": {"number": "123"}},
    )

    assert to_payload(payer) == {
        "email": "buyer@example.com",
        "identification": {"type": "CPF", "number": "19119119100"},
        "phone": {"number": "123"},
    }
