"""
Base payment client implementing shared concerns: unsupported operations,
logging and the no-op process step of redirect payment methods.

Concrete providers should subclass and implement provider-specific logic.
"""
from __future__ import annotations

from typing import Any

from core.logging_config import get_logger
from application.ports.payment_gateway import PaymentGateway
from infrastructure.external.payments.exceptions import PaymentOperationNotSupportedException


logger = get_logger(__name__)


class BasePaymentClient(PaymentGateway):
    provider: str = "base"

    # Redirect methods charge on the hosted page, nothing happens before it
    async def process_payment(self, order_id: int) -> None:
        self._log("payment_process_skipped", order_id=order_id)

    # Default implementations raise; redirect gateways rarely support these
    async def capture(self, order_id: int) -> None:
        raise PaymentOperationNotSupportedException(
            "Capture method not supported", provider=self.provider, operation="capture"
        )

    async def refund(self, order_id: int, amount: Any = None) -> None:
        raise PaymentOperationNotSupportedException(
            "Refund method not supported", provider=self.provider, operation="refund"
        )

    async def void(self, order_id: int) -> None:
        raise PaymentOperationNotSupportedException(
            "Void method not supported", provider=self.provider, operation="void"
        )

    async def process_recurring_payment(self, order_id: int) -> None:
        raise PaymentOperationNotSupportedException(
            "Recurring payment not supported", provider=self.provider, operation="process_recurring"
        )

    async def cancel_recurring_payment(self, order_id: int) -> None:
        raise PaymentOperationNotSupportedException(
            "Recurring payment not supported", provider=self.provider, operation="cancel_recurring"
        )

    # Helpers
    def _log(self, event: str, **kwargs) -> None:
        logger.info(
            event,
            provider=self.provider,
            **kwargs,
        )
