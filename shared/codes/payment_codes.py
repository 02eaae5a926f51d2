"""
Payment specific codes.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    # Provider/configuration errors (6xxxx)
    CONFIGURATION_ERROR = 60001
    OPERATION_NOT_SUPPORTED = 60002
    REPOST_NOT_ALLOWED = 60003
