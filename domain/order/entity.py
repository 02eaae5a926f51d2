"""
Order domain entities - the host-owned order aggregate this plugin updates.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from domain.common.exceptions import DomainValidationException


class OrderStatus(str, Enum):
    """Order fulfilment status"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Order payment status"""
    PENDING = "pending"
    AUTHORIZED = "authorized"
    PAID = "paid"
    PARTIALLY_REFUNDED = "partially_refunded"
    REFUNDED = "refunded"
    VOIDED = "voided"


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Normalize a timestamp to UTC (naive values are treated as UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Order:
    """
    Order aggregate root

    Business rules:
    1. A cancelled order can never be marked as paid
    2. A paid, refunded or voided order cannot be marked as paid again
    3. Marking as paid moves a pending order to processing
    """

    id: Optional[int]
    order_total: Decimal
    billing_address_id: Optional[int] = None
    order_status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    authorization_transaction_id: Optional[str] = None
    created_on_utc: Optional[datetime] = None
    paid_date_utc: Optional[datetime] = None
    deleted: bool = False

    def __post_init__(self):
        self.created_on_utc = _ensure_utc(self.created_on_utc)
        self.paid_date_utc = _ensure_utc(self.paid_date_utc)

    def can_mark_as_paid(self) -> bool:
        if self.order_status == OrderStatus.CANCELLED:
            return False
        return self.payment_status not in (
            PaymentStatus.PAID,
            PaymentStatus.REFUNDED,
            PaymentStatus.VOIDED,
        )

    def mark_as_paid(self, now: Optional[datetime] = None) -> None:
        """Transition the order to paid; raises if the current state forbids it."""
        if not self.can_mark_as_paid():
            raise DomainValidationException(
                f"Cannot mark order with payment status {self.payment_status.value} as paid",
                field="payment_status",
                details={"order_id": self.id},
            )
        self.payment_status = PaymentStatus.PAID
        self.paid_date_utc = _ensure_utc(now) or datetime.now(timezone.utc)
        if self.order_status == OrderStatus.PENDING:
            self.order_status = OrderStatus.PROCESSING


@dataclass
class OrderNote:
    """Free-text note attached to an order; notes are only ever appended."""

    order_id: int
    note: str
    display_to_customer: bool = False
    created_on_utc: Optional[datetime] = None
    id: Optional[int] = None

    def __post_init__(self):
        self.created_on_utc = _ensure_utc(self.created_on_utc) or datetime.now(timezone.utc)
