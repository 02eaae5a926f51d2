"""
Money helpers shared by the outbound signer and the notification validator.

Amounts are rounded half-to-even to two places, the rounding the host
platform applies to order totals and the gateway expects on the wire.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_EVEN

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_EVEN)


def format_amount(value: Decimal) -> str:
    """Render an amount as ``0.00`` (dot separator, no grouping)."""
    return format(round_money(value), "f")


def amounts_match(left: Decimal, right: Decimal) -> bool:
    return round_money(left) == round_money(right)


def calculate_additional_fee(cart_total: Decimal, fee: Decimal, use_percentage: bool) -> Decimal:
    """Payment method surcharge: fixed value or percentage of the cart total."""
    if fee <= ZERO:
        return fee
    result = cart_total * fee / Decimal(100) if use_percentage else fee
    if result > ZERO:
        result = round_money(result)
    return result
