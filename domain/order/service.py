"""
Order processing domain service - the paid transition guarded by order state.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from .entity import Order, OrderNote
from .repository import OrderRepository


class OrderProcessingService:
    """Applies payment state transitions to orders through the repository."""

    def __init__(self, order_repository: OrderRepository):
        self.order_repository = order_repository

    def can_mark_order_as_paid(self, order: Order) -> bool:
        return order.can_mark_as_paid()

    async def mark_order_as_paid(self, order: Order, now: Optional[datetime] = None) -> Order:
        order.mark_as_paid(now)
        updated = await self.order_repository.update(order)
        await self.order_repository.add_note(
            OrderNote(
                order_id=order.id,
                note="Order has been marked as paid",
                display_to_customer=False,
                created_on_utc=order.paid_date_utc,
            )
        )
        return updated
