"""
Payment DTOs (Pydantic v2) used at application boundaries.
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

_INTEGER_RE = re.compile(r"^\s*[+-]?[0-9]+\s*$")
_DECIMAL_RE = re.compile(r"^\s*[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)\s*$")


def parse_order_number(value: str) -> Optional[int]:
    """Parse a 32-bit signed integer; None for anything else."""
    if not value or not _INTEGER_RE.match(value):
        return None
    number = int(value)
    if number < INT32_MIN or number > INT32_MAX:
        return None
    return number


def parse_amount(value: str) -> Optional[Decimal]:
    """Parse a plain decimal (digits, optional sign and point); None otherwise.

    Exponents, digit separators and values too large to round to cents are
    rejected.
    """
    if not value or not _DECIMAL_RE.match(value):
        return None
    amount = Decimal(value.strip())
    try:
        amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        return None
    return amount


class BillingContact(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    province_code: Optional[str] = None  # empty on the wire when the state is unresolved
    country_code: Optional[str] = None  # ISO-3166 alpha-2
    postal_code: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}"


class OutboundPaymentRequest(BaseModel):
    merchant_id: str
    order_id: int
    amount: Decimal
    billing_contact: Optional[BillingContact] = None

    model_config = ConfigDict(frozen=True)


class SignedRedirect(BaseModel):
    base_url: str
    query_string: str
    hash_value: str

    model_config = ConfigDict(frozen=True)

    @property
    def url(self) -> str:
        return f"{self.base_url}?{self.query_string}&hashValue={self.hash_value}"


class InboundNotification(BaseModel):
    """Fields posted back by the hosted payment page.

    Declared in wire order; attribute names are the snake_case form of the
    camelCase wire keys. Absent keys default to an empty string.
    """

    trn_approved: str = ""
    trn_id: str = ""
    message_id: str = ""
    message_text: str = ""
    auth_code: str = ""
    response_type: str = ""
    trn_amount: str = ""
    trn_date: str = ""
    trn_order_number: str = ""
    trn_language: str = ""
    trn_customer_name: str = ""
    trn_email_address: str = ""
    trn_phone_number: str = ""
    avs_processed: str = ""
    avs_id: str = ""
    avs_result: str = ""
    avs_postal_match: str = ""
    avs_message: str = ""
    cvd_id: str = ""
    card_type: str = ""
    trn_type: str = ""
    payment_method: str = ""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "InboundNotification":
        data = {}
        for name, field in cls.model_fields.items():
            value = params.get(field.alias or name)
            data[name] = "" if value is None else str(value)
        return cls(**data)

    @property
    def approved(self) -> bool:
        return self.trn_approved == "1"

    def order_number(self) -> Optional[int]:
        return parse_order_number(self.trn_order_number)

    def amount(self) -> Optional[Decimal]:
        return parse_amount(self.trn_amount)

    def as_dict(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)

    def as_lines(self) -> str:
        return "".join(f"{key}: {value}\n" for key, value in self.as_dict().items())


class ResultOutcome(BaseModel):
    """Where the browser is sent after the result redirect."""

    redirect: Literal["home", "checkout_completed"]
    order_id: Optional[int] = None


class NotificationOutcome(str, Enum):
    INVALID_ORDER_NUMBER = "invalid_order_number"
    ORDER_NOT_FOUND = "order_not_found"
    INVALID_AMOUNT = "invalid_amount"
    AMOUNT_MISMATCH = "amount_mismatch"
    NOT_APPROVED = "not_approved"
    NOT_PAYABLE = "not_payable"
    MARKED_AS_PAID = "marked_as_paid"
    FAILED = "failed"


class PaymentMethodInfo(BaseModel):
    provider: str
    description: str
    redirection_tip: str
    additional_fee: Optional[Decimal] = None  # only known for a given cart total
    payment_method_type: Literal["redirection"] = "redirection"
    recurring_payment_type: Literal["not_supported"] = "not_supported"
    supports_capture: bool = False
    supports_partial_refund: bool = False
    supports_refund: bool = False
    supports_void: bool = False
    skip_payment_info: bool = False
    hide_payment_method: bool = False
