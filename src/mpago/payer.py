"""
Payer structures used by payment requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from .core.options import FieldChecker
from .core.resources import extra_fields, open_enum, optional_int, optional_str, require_mapping

__all__ = [
    "AdditionalInfoPayer",
    "EntityType",
    "IdentificationType",
    "Payer",
    "PayerAddress",
    "PayerIdentification",
    "PayerType",
    "PhoneNumber",
    "check_payer",
]


class EntityType(str, Enum):
    INDIVIDUAL = "individual"
    ASSOCIATION = "association"


class PayerType(str, Enum):
    CUSTOMER = "customer"
    REGISTERED = "registered"
    GUEST = "guest"


class IdentificationType(str, Enum):
    CPF = "CPF"
    CNPJ = "CNPJ"
    CUIT = "CUIT"
    CUIL = "CUIL"
    DNI = "DNI"
    CURP = "CURP"
    RFC = "RFC"
    CC = "CC"
    RUT = "RUT"
    CI = "CI"


@dataclass
class PayerIdentification:
    type: Optional[Union[IdentificationType, str]] = None
    number: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PayerIdentification":
        data = require_mapping(data, "payer.identification")
        return cls(
            type=open_enum(IdentificationType, data.get("type")),
            number=optional_str(data.get("number")),
        )


@dataclass
class PhoneNumber:
    area_code: Optional[str] = None
    number: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhoneNumber":
        data = require_mapping(data, "phone")
        return cls(
            area_code=optional_str(data.get("area_code")),
            number=optional_str(data.get("number")),
        )


@dataclass
class PayerAddress:
    zip_code: Optional[str] = None
    street_name: Optional[str] = None
    street_number: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PayerAddress":
        data = require_mapping(data, "address")
        return cls(
            zip_code=optional_str(data.get("zip_code")),
            street_name=optional_str(data.get("street_name")),
            street_number=optional_int(data.get("street_number")),
        )


@dataclass
class Payer:
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    id: Optional[str] = None
    type: Optional[Union[PayerType, str]] = None
    entity_type: Optional[Union[EntityType, str]] = None
    identification: Optional[PayerIdentification] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Payer":
        data = require_mapping(data, "payer")
        identification = data.get("identification")
        return cls(
            email=optional_str(data.get("email")),
            first_name=optional_str(data.get("first_name")),
            last_name=optional_str(data.get("last_name")),
            id=optional_str(data.get("id")),
            type=open_enum(PayerType, data.get("type")),
            entity_type=open_enum(EntityType, data.get("entity_type")),
            identification=(
                PayerIdentification.from_dict(identification) if identification else None
            ),
            extra=extra_fields(cls, data),
        )


@dataclass
class AdditionalInfoPayer:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[PhoneNumber] = None
    address: Optional[PayerAddress] = None
    registration_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionalInfoPayer":
        data = require_mapping(data, "additional_info.payer")
        phone = data.get("phone")
        address = data.get("address")
        return cls(
            first_name=optional_str(data.get("first_name")),
            last_name=optional_str(data.get("last_name")),
            phone=PhoneNumber.from_dict(phone) if phone else None,
            address=PayerAddress.from_dict(address) if address else None,
            registration_date=optional_str(data.get("registration_date")),
        )


def check_payer(checker: FieldChecker, payer: Optional[Payer], prefix: str = "payer") -> None:
    """Validate ``payer`` in place, normalizing enum fields to members."""
    if payer is None:
        return
    payer.email = checker.email(f"{prefix}.email", payer.email)
    payer.type = checker.enum(f"{prefix}.type", payer.type, PayerType)
    payer.entity_type = checker.enum(f"{prefix}.entity_type", payer.entity_type, EntityType)
    if payer.identification is not None:
        identification = payer.identification
        identification.type = checker.enum(
            f"{prefix}.identification.type",
            identification.type,
            IdentificationType,
            required=True,
        )
        checker.require(f"{prefix}.identification.number", identification.number)
