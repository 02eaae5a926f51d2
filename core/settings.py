"""
Payment-related settings using pydantic-settings v2 with nested env keys.

This module is isolated so core.config.Settings stays about the app itself.
Example: BAMBORA__MERCHANT_ID=300200000, BAMBORA__HASH_KEY=secret.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field


class WebhookSettings(BaseModel):
    ip_allowlist: list[str] | None = None  # Optional IPs/CIDRs allowed to post notifications


class BamboraSettings(BaseModel):
    merchant_id: Optional[str] = None
    hash_key: Optional[str] = None
    additional_fee: Decimal = Decimal("0")
    additional_fee_percentage: bool = False
    gateway_url: str = "https://www.beanstream.com/scripts/payment/payment.asp"
    # Byte encoding of "query string + hash key" before hashing
    hash_encoding: str = "utf-8"
    home_url: str = "/"
    checkout_completed_url: str = "/checkout/completed"
    repost_delay_seconds: int = 5


class PaymentSettings(BaseSettings):
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)
    bambora: BamboraSettings = Field(default_factory=BamboraSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )


payment_settings = PaymentSettings()
