import pytest

from mpago import AgreementBuilder, AgreementData, BuilderConsumedError, ExternalUser, ValidationError
from mpago.core.transport import IDEMPOTENCY_HEADER


def test_create_agreement(client, session):
    session.queue(200, {"agreement_id": "ag-1", "agreement_uri": "https://mercadopago.com/wallet/ag-1"})

    builder = (
        AgreementBuilder("https://example.com/return")
        .client_id("123456")
        .platform_id("my-platform")
        .agreement_data(AgreementData(validation_amount="5.00", description="Verification"))
        .external_flow_id("order-42")
        .external_user(ExternalUser(id="user-1", description="Jane"))
    )
    agreement = client.create_agreement(builder)

    assert agreement.id == "ag-1"
    assert agreement.uri == "https://mercadopago.com/wallet/ag-1"

    call = session.calls[0]
    assert call.url == "https://api.mercadopago.com/v2/wallet_connect/agreements"
    assert call.params == {"client.id": "123456"}
    assert call.headers["X-Platform-ID"] == "my-platform"
    assert call.headers[IDEMPOTENCY_HEADER]
    assert call.json == {
        "return_url": "https://example.com/return",
        "agreement_data": {"validation_amount": 5.0, "description": "Verification"},
        "external_flow_id": "order-42",
        "external_user": {"id": "user-1", "description": "Jane"},
    }


def test_return_url_is_required():
    with pytest.raises(ValidationError) as excinfo:
        AgreementBuilder().build()

    assert excinfo.value.fields == ("return_url",)


def test_optional_parts_are_omitted():
    request = AgreementBuilder().return_url("https://example.com/return").build()

    assert request.payload == {"return_url": "https://example.com/return"}
    assert dict(request.query) == {}
    assert "X-Platform-ID" not in request.headers


def test_setters_fail_after_send(client, session):
    session.queue(200, {"agreement_id": "ag-1", "agreement_uri": "https://mercadopago.com/wallet/ag-1"})
    builder = AgreementBuilder("https://example.com/return")
    builder.send(client)

    with pytest.raises(BuilderConsumedError):
        builder.platform_id("late")
