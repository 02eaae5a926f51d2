from datetime import datetime, timezone
from decimal import Decimal

import pytest

from domain.common.exceptions import DomainValidationException
from domain.order.entity import Order, OrderStatus, PaymentStatus
from domain.order.service import OrderProcessingService


def test_mark_as_paid_moves_pending_order_to_processing():
    order = Order(id=1, order_total=Decimal("10"))
    paid_at = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)

    order.mark_as_paid(paid_at)

    assert order.payment_status == PaymentStatus.PAID
    assert order.order_status == OrderStatus.PROCESSING
    assert order.paid_date_utc == paid_at


def test_mark_as_paid_keeps_completed_order_status():
    order = Order(id=1, order_total=Decimal("10"), order_status=OrderStatus.COMPLETE)
    order.mark_as_paid()
    assert order.order_status == OrderStatus.COMPLETE


@pytest.mark.parametrize(
    "order_status,payment_status,allowed",
    [
        (OrderStatus.PENDING, PaymentStatus.PENDING, True),
        (OrderStatus.PROCESSING, PaymentStatus.AUTHORIZED, True),
        (OrderStatus.PROCESSING, PaymentStatus.PARTIALLY_REFUNDED, True),
        (OrderStatus.PROCESSING, PaymentStatus.PAID, False),
        (OrderStatus.PROCESSING, PaymentStatus.REFUNDED, False),
        (OrderStatus.PROCESSING, PaymentStatus.VOIDED, False),
        (OrderStatus.CANCELLED, PaymentStatus.PENDING, False),
    ],
)
def test_can_mark_as_paid(order_status, payment_status, allowed):
    order = Order(id=1, order_total=Decimal("10"), order_status=order_status, payment_status=payment_status)
    assert order.can_mark_as_paid() is allowed


def test_mark_as_paid_twice_raises():
    order = Order(id=1, order_total=Decimal("10"))
    order.mark_as_paid()
    with pytest.raises(DomainValidationException):
        order.mark_as_paid()


def test_naive_timestamps_are_treated_as_utc():
    order = Order(id=1, order_total=Decimal("10"), created_on_utc=datetime(2026, 1, 1, 12, 0))
    assert order.created_on_utc.tzinfo == timezone.utc


@pytest.mark.asyncio
async def test_processing_service_persists_and_notes(store, uow_factory):
    store.add_order(Order(id=1, order_total=Decimal("10")))

    async with uow_factory() as uow:
        service = OrderProcessingService(uow.order_repository)
        order = await uow.order_repository.get_by_id(1)
        assert service.can_mark_order_as_paid(order)
        await service.mark_order_as_paid(order)

    assert store.orders[1].payment_status == PaymentStatus.PAID
    assert [n.note for n in store.notes_for(1)] == ["Order has been marked as paid"]
    assert store.commits == 1
