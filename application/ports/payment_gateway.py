"""
Payment gateway port (application/ports) exposing a replaceable protocol.

Application depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from application.dtos.payments import (
    BillingContact,
    InboundNotification,
    OutboundPaymentRequest,
    PaymentMethodInfo,
    SignedRedirect,
)
from domain.order.entity import Order


@runtime_checkable
class PaymentGateway(Protocol):
    """Redirect (hosted payment page) gateway protocol.

    Implementations must be pure: building a redirect or parsing a callback
    performs no IO.
    """

    provider: str

    def create_request(
        self, order_id: int, amount: Decimal, billing_contact: Optional[BillingContact] = None
    ) -> OutboundPaymentRequest: ...

    def build_redirect(self, req: OutboundPaymentRequest) -> SignedRedirect: ...

    def parse_notification(self, params: Mapping[str, Any]) -> InboundNotification: ...

    def can_repost_payment(self, order: Order, now: Optional[datetime] = None) -> bool: ...

    def get_method_info(self, cart_total: Optional[Decimal] = None) -> PaymentMethodInfo: ...
