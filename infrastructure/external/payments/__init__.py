"""
Factory for payment gateway clients.
"""
from __future__ import annotations

from typing import Optional

from application.ports.payment_gateway import PaymentGateway


def get_payment_gateway(provider: Optional[str] = None) -> PaymentGateway:
    name = (provider or "bambora").lower()
    if name in {"bambora", "beanstream"}:
        from .bambora_client import BamboraClient
        return BamboraClient()
    raise ValueError(f"Unsupported payment provider: {name}")
