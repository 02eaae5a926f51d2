"""
Bambora (Beanstream) hosted payment page adapter.

Builds the signed redirect to the hosted payment form and extracts the
fields the gateway posts back. The signature is an MD5 digest over the
exact query string followed by the merchant hash key; the gateway recomputes
it byte for byte, so field order and value encoding must not change.
"""
from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional
from urllib.parse import quote_plus

from application.dtos.payments import (
    BillingContact,
    InboundNotification,
    OutboundPaymentRequest,
    PaymentMethodInfo,
    SignedRedirect,
)
from core.i18n import t
from core.settings import BamboraSettings, payment_settings
from domain.order.entity import Order
from domain.payment.money import calculate_additional_fee, format_amount
from infrastructure.external.payments.base import BasePaymentClient
from infrastructure.external.payments.exceptions import PaymentConfigurationError


def url_encode(value: Optional[str]) -> str:
    """Form-encode a value the way the gateway does before verifying the hash.

    Space becomes '+', letters, digits and ``-_.!*()`` stay as they are and
    everything else is percent-encoded (upper-case hex over UTF-8).
    """
    if value is None:
        return ""
    return quote_plus(str(value), safe="!*()").replace("~", "%7E")


def calculate_hash(payload: str, hash_key: str, encoding: str = "utf-8") -> str:
    return hashlib.md5(f"{payload}{hash_key}".encode(encoding)).hexdigest()


def build_query_string(req: OutboundPaymentRequest) -> str:
    """Serialize the request in the fixed field order the hash is computed over."""
    pairs = [
        ("merchant_id", url_encode(req.merchant_id)),
        ("trnOrderNumber", str(req.order_id)),
        ("trnAmount", format_amount(req.amount)),
    ]
    contact = req.billing_contact
    if contact is not None:
        pairs.extend([
            ("ordName", url_encode(contact.full_name)),
            ("ordEmailAddress", url_encode(contact.email)),
            ("ordPhoneNumber", url_encode(contact.phone)),
            ("ordAddress1", url_encode(contact.address1)),
            ("ordAddress2", url_encode(contact.address2)),
            ("ordCity", url_encode(contact.city)),
            ("ordProvince", url_encode(contact.province_code)),
            ("ordCountry", url_encode(contact.country_code)),
            ("ordPostalCode", url_encode(contact.postal_code)),
        ])
    return "&".join(f"{key}={value}" for key, value in pairs)


def sign_request(
    req: OutboundPaymentRequest,
    hash_key: str,
    *,
    base_url: str,
    encoding: str = "utf-8",
) -> SignedRedirect:
    query_string = build_query_string(req)
    return SignedRedirect(
        base_url=base_url,
        query_string=query_string,
        hash_value=calculate_hash(query_string, hash_key, encoding),
    )


class BamboraClient(BasePaymentClient):
    provider = "bambora"

    def __init__(self, settings: Optional[BamboraSettings] = None):
        self._cfg = settings or payment_settings.bambora

    @property
    def settings(self) -> BamboraSettings:
        return self._cfg

    def _ensure_configured(self) -> None:
        missing = [name for name in ("merchant_id", "hash_key") if not getattr(self._cfg, name)]
        if missing:
            raise PaymentConfigurationError(
                "BAMBORA configuration incomplete", provider=self.provider, missing=missing
            )

    def create_request(
        self, order_id: int, amount: Decimal, billing_contact: Optional[BillingContact] = None
    ) -> OutboundPaymentRequest:  # type: ignore[override]
        self._ensure_configured()
        return OutboundPaymentRequest(
            merchant_id=self._cfg.merchant_id,
            order_id=order_id,
            amount=amount,
            billing_contact=billing_contact,
        )

    def build_redirect(self, req: OutboundPaymentRequest) -> SignedRedirect:  # type: ignore[override]
        self._ensure_configured()
        redirect = sign_request(
            req,
            self._cfg.hash_key,
            base_url=self._cfg.gateway_url,
            encoding=self._cfg.hash_encoding,
        )
        self._log(
            "bambora_redirect_built",
            order_id=req.order_id,
            amount=format_amount(req.amount),
            with_billing_contact=req.billing_contact is not None,
        )
        return redirect

    def parse_notification(self, params: Mapping[str, Any]) -> InboundNotification:  # type: ignore[override]
        return InboundNotification.from_params(params)

    def can_repost_payment(self, order: Order, now: Optional[datetime] = None) -> bool:  # type: ignore[override]
        # Give the first redirect a head start before a customer may retry
        if order.created_on_utc is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now - order.created_on_utc >= timedelta(seconds=self._cfg.repost_delay_seconds)

    def get_additional_handling_fee(self, cart_total: Decimal) -> Decimal:
        return calculate_additional_fee(
            cart_total, self._cfg.additional_fee, self._cfg.additional_fee_percentage
        )

    def get_method_info(self, cart_total: Optional[Decimal] = None) -> PaymentMethodInfo:  # type: ignore[override]
        fee = self.get_additional_handling_fee(cart_total) if cart_total is not None else None
        return PaymentMethodInfo(
            provider=self.provider,
            description=t("You will be redirected to Bambora site to complete the order."),
            redirection_tip=t("You will be redirected to Bambora site to complete the order."),
            additional_fee=fee,
        )
