"""
Request options and response resources for ``/v1/payments``.

API reference: https://www.mercadopago.com.br/developers/pt/reference/payments/_payments/post
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from ..common import CurrencyId
from ..core.resources import (
    extra_fields,
    open_enum,
    optional_bool,
    optional_decimal,
    optional_int,
    optional_str,
    optional_timestamp,
    parse_list,
    require_decimal,
    require_mapping,
)
from ..payer import AdditionalInfoPayer, Payer

if TYPE_CHECKING:
    from ..core.builder import RequestSender

__all__ = [
    "AdditionalInfo",
    "Amount",
    "ApplicationData",
    "Cardholder",
    "CARD_PAYMENT_METHODS",
    "FeeDetail",
    "FeeDetailsType",
    "FeePayer",
    "OperationType",
    "Payment",
    "PaymentCard",
    "PaymentCreateOptions",
    "PaymentMethodId",
    "PaymentProcessingMode",
    "PaymentSearchCriteria",
    "PaymentSearchOptions",
    "PaymentSearchRange",
    "PaymentSearchSort",
    "PaymentStatus",
    "PaymentStatusDetail",
    "PaymentSummary",
    "PaymentTypeId",
    "PaymentUpdateOptions",
    "PointOfInteraction",
    "ProductItem",
    "ReceiverAddress",
    "Shipments",
    "TransactionData",
    "TransactionDetails",
    "default_payment_create_options",
]

Amount = Union[Decimal, int, float, str]


class PaymentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    AUTHORIZED = "authorized"
    IN_PROCESS = "in_process"
    IN_MEDIATION = "in_mediation"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    CHARGED_BACK = "charged_back"


class PaymentStatusDetail(str, Enum):
    ACCREDITED = "accredited"
    PENDING_CONTINGENCY = "pending_contingency"
    PENDING_WAITING_TRANSFER = "pending_waiting_transfer"
    PENDING_WAITING_PAYMENT = "pending_waiting_payment"
    PENDING_REVIEW_MANUAL = "pending_review_manual"
    CC_REJECTED_BAD_FILLED_DATE = "cc_rejected_bad_filled_date"
    CC_REJECTED_BAD_FILLED_OTHER = "cc_rejected_bad_filled_other"
    CC_REJECTED_BAD_FILLED_SECURITY_CODE = "cc_rejected_bad_filled_security_code"
    CC_REJECTED_BLACKLIST = "cc_rejected_blacklist"
    CC_REJECTED_CALL_FOR_AUTHORIZE = "cc_rejected_call_for_authorize"
    CC_REJECTED_CARD_DISABLED = "cc_rejected_card_disabled"
    CC_REJECTED_DUPLICATED_PAYMENT = "cc_rejected_duplicated_payment"
    CC_REJECTED_HIGH_RISK = "cc_rejected_high_risk"
    CC_REJECTED_INSUFFICIENT_AMOUNT = "cc_rejected_insufficient_amount"
    CC_REJECTED_INVALID_INSTALLMENTS = "cc_rejected_invalid_installments"
    CC_REJECTED_MAX_ATTEMPTS = "cc_rejected_max_attempts"
    CC_REJECTED_OTHER_REASON = "cc_rejected_other_reason"
    BY_COLLECTOR = "by_collector"
    BY_PAYER = "by_payer"
    EXPIRED = "expired"


class PaymentTypeId(str, Enum):
    ACCOUNT_MONEY = "account_money"
    TICKET = "ticket"
    BANK_TRANSFER = "bank_transfer"
    ATM = "atm"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PREPAID_CARD = "prepaid_card"
    DIGITAL_CURRENCY = "digital_currency"
    DIGITAL_WALLET = "digital_wallet"
    VOUCHER_CARD = "voucher_card"
    CRYPTO_TRANSFER = "crypto_transfer"


class OperationType(str, Enum):
    INVESTMENT = "investment"
    REGULAR_PAYMENT = "regular_payment"
    MONEY_TRANSFER = "money_transfer"
    RECURRING_PAYMENT = "recurring_payment"
    ACCOUNT_FUND = "account_fund"
    PAYMENT_ADDITION = "payment_addition"
    CELLPHONE_RECHARGE = "cellphone_recharge"
    POS_PAYMENT = "pos_payment"
    MONEY_EXCHANGE = "money_exchange"


class PaymentMethodId(str, Enum):
    PIX = "pix"
    ELO = "elo"
    VISA = "visa"
    MASTER = "master"
    HIPERCARD = "hipercard"
    AMEX = "amex"
    CABAL = "cabal"
    MELIPLACES = "meliplaces"
    BOLBRADESCO = "bolbradesco"
    DEBVISA = "debvisa"
    DEBELO = "debelo"
    DEBMASTER = "debmaster"
    DEBCABAL = "debcabal"
    MAESTRO = "maestro"
    ACCOUNT_MONEY = "account_money"
    PEC = "pec"


CARD_PAYMENT_METHODS = frozenset(
    {
        PaymentMethodId.ELO,
        PaymentMethodId.VISA,
        PaymentMethodId.MASTER,
        PaymentMethodId.HIPERCARD,
        PaymentMethodId.AMEX,
        PaymentMethodId.CABAL,
        PaymentMethodId.DEBVISA,
        PaymentMethodId.DEBELO,
        PaymentMethodId.DEBMASTER,
        PaymentMethodId.DEBCABAL,
        PaymentMethodId.MAESTRO,
    }
)


class PaymentProcessingMode(str, Enum):
    AGGREGATOR = "aggregator"
    GATEWAY = "gateway"


class FeePayer(str, Enum):
    COLLECTOR = "collector"
    PAYER = "payer"


class FeeDetailsType(str, Enum):
    MERCADOPAGO_FEE = "mercadopago_fee"
    COUPON_FEE = "coupon_fee"
    FINANCING_FEE = "financing_fee"
    SHIPPING_FEE = "shipping_fee"
    APPLICATION_FEE = "application_fee"
    DISCOUNT_FEE = "discount_fee"


class PaymentSearchSort(str, Enum):
    DATE_APPROVED = "date_approved"
    DATE_CREATED = "date_created"
    DATE_LAST_UPDATED = "date_last_updated"
    ID = "id"
    MONEY_RELEASE_DATE = "money_release_date"


class PaymentSearchCriteria(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class PaymentSearchRange(str, Enum):
    DATE_APPROVED = "date_approved"
    DATE_CREATED = "date_created"
    DATE_LAST_UPDATED = "date_last_updated"
    MONEY_RELEASE_DATE = "money_release_date"


# =============================================================================
# Request options
# =============================================================================


@dataclass
class ProductItem:
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    picture_url: Optional[str] = None
    category_id: Optional[str] = None
    # The API expects quantity and unit_price as strings.
    quantity: Optional[int] = field(default=None, metadata={"as_string": True})
    unit_price: Optional[Amount] = field(default=None, metadata={"as_string": True})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductItem":
        data = require_mapping(data, "item")
        return cls(
            id=optional_str(data.get("id")),
            title=optional_str(data.get("title")),
            description=optional_str(data.get("description")),
            picture_url=optional_str(data.get("picture_url")),
            category_id=optional_str(data.get("category_id")),
            quantity=optional_int(data.get("quantity")),
            unit_price=optional_decimal(data.get("unit_price")),
        )


@dataclass
class ReceiverAddress:
    zip_code: Optional[str] = None
    state_name: Optional[str] = None
    city_name: Optional[str] = None
    street_name: Optional[str] = None
    street_number: Optional[int] = None
    floor: Optional[str] = None
    apartment: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReceiverAddress":
        data = require_mapping(data, "receiver_address")
        return cls(
            zip_code=optional_str(data.get("zip_code")),
            state_name=optional_str(data.get("state_name")),
            city_name=optional_str(data.get("city_name")),
            street_name=optional_str(data.get("street_name")),
            street_number=optional_int(data.get("street_number")),
            floor=optional_str(data.get("floor")),
            apartment=optional_str(data.get("apartment")),
        )


@dataclass
class Shipments:
    receiver_address: Optional[ReceiverAddress] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Shipments":
        data = require_mapping(data, "shipments")
        address = data.get("receiver_address")
        return cls(
            receiver_address=ReceiverAddress.from_dict(address) if address else None,
            width=optional_int(data.get("width")),
            height=optional_int(data.get("height")),
        )


@dataclass
class AdditionalInfo:
    ip_address: Optional[str] = None
    items: Optional[List[ProductItem]] = None
    payer: Optional[AdditionalInfoPayer] = None
    shipments: Optional[Shipments] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionalInfo":
        data = require_mapping(data, "additional_info")
        payer = data.get("payer")
        shipments = data.get("shipments")
        return cls(
            ip_address=optional_str(data.get("ip_address")),
            items=[ProductItem.from_dict(item) for item in parse_list(data.get("items"), "items")],
            payer=AdditionalInfoPayer.from_dict(payer) if payer else None,
            shipments=Shipments.from_dict(shipments) if shipments else None,
        )


@dataclass
class PaymentCreateOptions:
    """Body of ``POST /v1/payments``. Only ``transaction_amount`` is mandatory."""

    transaction_amount: Optional[Amount] = None
    description: Optional[str] = None
    payment_method_id: Optional[Union[PaymentMethodId, str]] = None
    payer: Optional[Payer] = None
    installments: Optional[int] = None
    date_of_expiration: Optional[Union[str, datetime]] = None
    additional_info: Optional[AdditionalInfo] = None
    application_fee: Optional[Amount] = None
    binary_mode: Optional[bool] = None
    callback_url: Optional[str] = None
    campaign_id: Optional[int] = None
    capture: Optional[bool] = None
    coupon_amount: Optional[Amount] = None
    coupon_code: Optional[str] = None
    differential_pricing_id: Optional[int] = None
    external_reference: Optional[str] = None
    issuer_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    notification_url: Optional[str] = None
    statement_descriptor: Optional[str] = None
    token: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def default_payment_create_options() -> PaymentCreateOptions:
    """Values used for any field the caller leaves unset."""
    return PaymentCreateOptions(
        description="",
        payment_method_id=PaymentMethodId.PIX,
        installments=1,
    )


@dataclass
class PaymentUpdateOptions:
    """Body of ``PUT /v1/payments/{id}``."""

    capture: Optional[bool] = None
    date_of_expiration: Optional[Union[str, datetime]] = None
    status: Optional[Union[PaymentStatus, str]] = None
    transaction_amount: Optional[Amount] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentSearchOptions:
    """Query of ``GET /v1/payments/search``."""

    sort: Optional[Union[PaymentSearchSort, str]] = None
    criteria: Optional[Union[PaymentSearchCriteria, str]] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    external_reference: Optional[str] = None
    range: Optional[Union[PaymentSearchRange, str]] = None
    begin_date: Optional[Union[str, datetime]] = None
    end_date: Optional[Union[str, datetime]] = None
    extra: Dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Response resources
# =============================================================================


@dataclass(frozen=True)
class FeeDetail:
    type: Optional[Union[FeeDetailsType, str]]
    amount: Decimal
    fee_payer: Optional[Union[FeePayer, str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeDetail":
        data = require_mapping(data, "fee_details")
        return cls(
            type=open_enum(FeeDetailsType, data.get("type")),
            amount=require_decimal(data.get("amount")),
            fee_payer=open_enum(FeePayer, data.get("fee_payer")),
        )


@dataclass(frozen=True)
class TransactionDetails:
    net_received_amount: Optional[Decimal] = None
    total_paid_amount: Optional[Decimal] = None
    overpaid_amount: Optional[Decimal] = None
    installment_amount: Optional[Decimal] = None
    payment_method_reference_id: Optional[str] = None
    external_resource_url: Optional[str] = None
    financial_institution: Optional[str] = None
    payable_deferral_period: Optional[str] = None
    acquirer_reference: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionDetails":
        data = require_mapping(data, "transaction_details")
        return cls(
            net_received_amount=optional_decimal(data.get("net_received_amount")),
            total_paid_amount=optional_decimal(data.get("total_paid_amount")),
            overpaid_amount=optional_decimal(data.get("overpaid_amount")),
            installment_amount=optional_decimal(data.get("installment_amount")),
            payment_method_reference_id=optional_str(data.get("payment_method_reference_id")),
            external_resource_url=optional_str(data.get("external_resource_url")),
            financial_institution=optional_str(data.get("financial_institution")),
            payable_deferral_period=optional_str(data.get("payable_deferral_period")),
            acquirer_reference=optional_str(data.get("acquirer_reference")),
        )


@dataclass(frozen=True)
class Cardholder:
    name: Optional[str] = None
    identification: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cardholder":
        data = require_mapping(data, "cardholder")
        return cls(name=optional_str(data.get("name")), identification=data.get("identification"))


@dataclass(frozen=True)
class PaymentCard:
    id: Optional[str] = None
    first_six_digits: Optional[str] = None
    last_four_digits: Optional[str] = None
    expiration_month: Optional[int] = None
    expiration_year: Optional[int] = None
    date_created: Optional[datetime] = None
    date_last_updated: Optional[datetime] = None
    cardholder: Optional[Cardholder] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaymentCard":
        data = require_mapping(data, "card")
        cardholder = data.get("cardholder")
        return cls(
            id=optional_str(data.get("id")),
            first_six_digits=optional_str(data.get("first_six_digits")),
            last_four_digits=optional_str(data.get("last_four_digits")),
            expiration_month=optional_int(data.get("expiration_month")),
            expiration_year=optional_int(data.get("expiration_year")),
            date_created=optional_timestamp(data.get("date_created")),
            date_last_updated=optional_timestamp(data.get("date_last_updated")),
            cardholder=Cardholder.from_dict(cardholder) if cardholder else None,
        )


@dataclass(frozen=True)
class TransactionData:
    qr_code: Optional[str] = None
    qr_code_base64: Optional[str] = None
    ticket_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionData":
        data = require_mapping(data, "transaction_data")
        return cls(
            qr_code=optional_str(data.get("qr_code")),
            qr_code_base64=optional_str(data.get("qr_code_base64")),
            ticket_url=optional_str(data.get("ticket_url")),
        )


@dataclass(frozen=True)
class ApplicationData:
    name: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplicationData":
        data = require_mapping(data, "application_data")
        return cls(name=optional_str(data.get("name")), version=optional_str(data.get("version")))


@dataclass(frozen=True)
class PointOfInteraction:
    type: Optional[str] = None
    sub_type: Optional[str] = None
    application_data: Optional[ApplicationData] = None
    transaction_data: Optional[TransactionData] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PointOfInteraction":
        data = require_mapping(data, "point_of_interaction")
        application_data = data.get("application_data")
        transaction_data = data.get("transaction_data")
        return cls(
            type=optional_str(data.get("type")),
            sub_type=optional_str(data.get("sub_type")),
            application_data=ApplicationData.from_dict(application_data) if application_data else None,
            transaction_data=TransactionData.from_dict(transaction_data) if transaction_data else None,
        )


def _require_id(data: Dict[str, Any]) -> int:
    payment_id = optional_int(data["id"])
    if payment_id is None:
        raise ValueError("payment id is missing")
    return payment_id


def _require_status(data: Dict[str, Any]) -> Union[PaymentStatus, str]:
    status = open_enum(PaymentStatus, data["status"])
    if status is None:
        raise ValueError("payment status is missing")
    return status


@dataclass(frozen=True)
class PaymentSummary:
    """A payment as listed by ``/v1/payments/search``."""

    id: int
    status: Union[PaymentStatus, str]
    transaction_amount: Decimal
    status_detail: Optional[Union[PaymentStatusDetail, str]] = None
    date_created: Optional[datetime] = None
    date_approved: Optional[datetime] = None
    date_last_updated: Optional[datetime] = None
    date_of_expiration: Optional[datetime] = None
    operation_type: Optional[Union[OperationType, str]] = None
    payment_method_id: Optional[Union[PaymentMethodId, str]] = None
    payment_type_id: Optional[Union[PaymentTypeId, str]] = None
    currency_id: Optional[Union[CurrencyId, str]] = None
    description: Optional[str] = None
    live_mode: Optional[bool] = None
    authorization_code: Optional[str] = None
    payer: Optional[Payer] = None
    external_reference: Optional[str] = None
    installments: Optional[int] = None
    processing_mode: Optional[Union[PaymentProcessingMode, str]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def _common_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        payer = data.get("payer")
        return {
            "id": _require_id(data),
            "status": _require_status(data),
            "transaction_amount": require_decimal(data["transaction_amount"]),
            "status_detail": open_enum(PaymentStatusDetail, data.get("status_detail")),
            "date_created": optional_timestamp(data.get("date_created")),
            "date_approved": optional_timestamp(data.get("date_approved")),
            "date_last_updated": optional_timestamp(data.get("date_last_updated")),
            "date_of_expiration": optional_timestamp(data.get("date_of_expiration")),
            "operation_type": open_enum(OperationType, data.get("operation_type")),
            "payment_method_id": open_enum(PaymentMethodId, data.get("payment_method_id")),
            "payment_type_id": open_enum(PaymentTypeId, data.get("payment_type_id")),
            "currency_id": open_enum(CurrencyId, data.get("currency_id")),
            "description": optional_str(data.get("description")),
            "live_mode": optional_bool(data.get("live_mode")),
            "authorization_code": optional_str(data.get("authorization_code")),
            "payer": Payer.from_dict(payer) if payer else None,
            "external_reference": optional_str(data.get("external_reference")),
            "installments": optional_int(data.get("installments")),
            "processing_mode": open_enum(PaymentProcessingMode, data.get("processing_mode")),
            "metadata": dict(data.get("metadata") or {}),
            "extra": extra_fields(cls, data),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaymentSummary":
        data = require_mapping(data, "payment")
        return cls(**cls._common_fields(data))

    def fetch(self, client: "RequestSender") -> "Payment":
        """Fetch the full payment resource."""
        from .builders import PaymentGetBuilder

        return PaymentGetBuilder(self.id).send(client)

    def cancel(self, client: "RequestSender") -> "Payment":
        from .builders import PaymentUpdateBuilder

        return PaymentUpdateBuilder.cancel(self.id).send(client)


@dataclass(frozen=True)
class Payment(PaymentSummary):
    """Full payment resource returned by create, get and update."""

    money_release_date: Optional[datetime] = None
    issuer_id: Optional[str] = None
    collector_id: Optional[int] = None
    additional_info: Optional[AdditionalInfo] = None
    transaction_amount_refunded: Optional[Decimal] = None
    coupon_amount: Optional[Decimal] = None
    taxes_amount: Optional[Decimal] = None
    shipping_amount: Optional[Decimal] = None
    transaction_details: Optional[TransactionDetails] = None
    fee_details: List[FeeDetail] = field(default_factory=list)
    captured: Optional[bool] = None
    binary_mode: Optional[bool] = None
    statement_descriptor: Optional[str] = None
    card: Optional[PaymentCard] = None
    notification_url: Optional[str] = None
    point_of_interaction: Optional[PointOfInteraction] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Payment":
        data = require_mapping(data, "payment")
        additional_info = data.get("additional_info")
        transaction_details = data.get("transaction_details")
        card = data.get("card")
        point_of_interaction = data.get("point_of_interaction")
        return cls(
            **cls._common_fields(data),
            money_release_date=optional_timestamp(data.get("money_release_date")),
            issuer_id=optional_str(data.get("issuer_id")),
            collector_id=optional_int(data.get("collector_id")),
            additional_info=AdditionalInfo.from_dict(additional_info) if additional_info else None,
            transaction_amount_refunded=optional_decimal(data.get("transaction_amount_refunded")),
            coupon_amount=optional_decimal(data.get("coupon_amount")),
            taxes_amount=optional_decimal(data.get("taxes_amount")),
            shipping_amount=optional_decimal(data.get("shipping_amount")),
            transaction_details=(
                TransactionDetails.from_dict(transaction_details) if transaction_details else None
            ),
            fee_details=[
                FeeDetail.from_dict(item) for item in parse_list(data.get("fee_details"), "fee_details")
            ],
            captured=optional_bool(data.get("captured")),
            binary_mode=optional_bool(data.get("binary_mode")),
            statement_descriptor=optional_str(data.get("statement_descriptor")),
            card=PaymentCard.from_dict(card) if card else None,
            notification_url=optional_str(data.get("notification_url")),
            point_of_interaction=(
                PointOfInteraction.from_dict(point_of_interaction) if point_of_interaction else None
            ),
        )
