"""
Exceptions for payment providers mapped to unified BusinessException variants.
"""
from __future__ import annotations

from typing import Optional
from domain.common.exceptions import BusinessException
from shared.codes.payment_codes import PaymentCode


class PaymentConfigurationError(BusinessException):
    def __init__(self, message: str, *, provider: str, missing: Optional[list[str]] = None):
        super().__init__(
            code=PaymentCode.CONFIGURATION_ERROR,
            message=message,
            error_type="PaymentConfigurationError",
            details={"provider": provider, "missing": missing or []},
            message_key="payments.configuration.incomplete",
        )


class PaymentOperationNotSupportedException(BusinessException):
    def __init__(self, message: str, *, provider: str, operation: str):
        super().__init__(
            code=PaymentCode.OPERATION_NOT_SUPPORTED,
            message=message,
            error_type="PaymentOperationNotSupported",
            details={"provider": provider, "operation": operation},
        )
