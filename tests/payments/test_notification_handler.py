from datetime import datetime, timezone
from decimal import Decimal

import pytest

from application.dtos.payments import NotificationOutcome
from domain.order.entity import Order, OrderStatus, PaymentStatus


def _params(**overrides) -> dict:
    params = {
        "trnApproved": "1",
        "trnId": "10000123",
        "messageId": "1",
        "messageText": "Approved",
        "authCode": "TEST",
        "responseType": "T",
        "trnAmount": "19.99",
        "trnDate": "10/19/2026 9:30:12 AM",
        "trnOrderNumber": "100",
        "trnLanguage": "eng",
        "trnCustomerName": "Jane Doe",
        "trnEmailAddress": "jane@example.com",
        "trnPhoneNumber": "5550100",
        "avsProcessed": "1",
        "avsId": "Y",
        "avsResult": "1",
        "avsPostalMatch": "1",
        "avsMessage": "Street address and Postal/ZIP match.",
        "cvdId": "1",
        "cardType": "VI",
        "trnType": "P",
        "paymentMethod": "CC",
    }
    params.update(overrides)
    return params


@pytest.mark.asyncio
async def test_approved_notification_marks_order_paid(payment_service, store, placed_order):
    outcome = await payment_service.handle_notification(_params())

    assert outcome is NotificationOutcome.MARKED_AS_PAID
    order = store.orders[100]
    assert order.payment_status == PaymentStatus.PAID
    assert order.order_status == OrderStatus.PROCESSING
    assert order.authorization_transaction_id == "10000123"
    assert order.paid_date_utc is not None

    notes = [n.note for n in store.notes_for(100)]
    assert notes[0].startswith("Bambora response notification:\n")
    assert "trnApproved: 1\n" in notes[0]
    assert "paymentMethod: CC\n" in notes[0]
    assert notes[-1] == "Order has been marked as paid"
    assert all(not n.display_to_customer for n in store.notes_for(100))


@pytest.mark.asyncio
async def test_duplicate_notification_transitions_once(payment_service, store, placed_order):
    first = await payment_service.handle_notification(_params())
    paid_at = store.orders[100].paid_date_utc
    second = await payment_service.handle_notification(_params(trnId="10000999"))

    assert first is NotificationOutcome.MARKED_AS_PAID
    assert second is NotificationOutcome.NOT_PAYABLE
    order = store.orders[100]
    assert order.paid_date_utc == paid_at
    assert order.authorization_transaction_id == "10000123"
    notes = [n.note for n in store.notes_for(100)]
    assert notes.count("Order has been marked as paid") == 1
    # every delivery is still recorded
    assert sum(n.startswith("Bambora response notification:") for n in notes) == 2


@pytest.mark.asyncio
async def test_amount_mismatch_leaves_order_untouched(payment_service, store, log_events):
    store.add_order(Order(id=100, order_total=Decimal("50.00")))

    outcome = await payment_service.handle_notification(_params(trnAmount="49.99"))

    assert outcome is NotificationOutcome.AMOUNT_MISMATCH
    order = store.orders[100]
    assert order.payment_status == PaymentStatus.PENDING
    assert order.authorization_transaction_id is None
    assert len(store.notes_for(100)) == 1

    errors = [e for e in log_events("error") if e["event"] == "bambora_notification_amount_mismatch"]
    assert errors
    assert errors[0]["notification_amount"] == "49.99"
    assert errors[0]["order_total"] == "50.00"
    assert errors[0]["order_id"] == 100


@pytest.mark.asyncio
async def test_amounts_are_compared_after_rounding(payment_service, store):
    store.add_order(Order(id=100, order_total=Decimal("19.994")))

    outcome = await payment_service.handle_notification(_params(trnAmount="19.99"))

    assert outcome is NotificationOutcome.MARKED_AS_PAID


@pytest.mark.asyncio
async def test_amount_with_surrounding_whitespace_is_accepted(payment_service, store, placed_order):
    outcome = await payment_service.handle_notification(_params(trnAmount=" 19.99 "))
    assert outcome is NotificationOutcome.MARKED_AS_PAID


@pytest.mark.asyncio
async def test_unknown_order_is_logged_with_field_dump(payment_service, store, log_events):
    outcome = await payment_service.handle_notification(_params(trnOrderNumber="99999"))

    assert outcome is NotificationOutcome.ORDER_NOT_FOUND
    assert store.notes == []
    errors = [e for e in log_events("error") if e["event"] == "bambora_notification_order_not_found"]
    assert errors
    assert "trnOrderNumber: 99999\n" in errors[0]["fields"]


@pytest.mark.parametrize("order_number", ["", "abc", "12.5", "1e3", "2147483648", "0x10"])
@pytest.mark.asyncio
async def test_unparseable_order_number_is_a_no_op(payment_service, store, placed_order, order_number):
    outcome = await payment_service.handle_notification(_params(trnOrderNumber=order_number))

    assert outcome is NotificationOutcome.INVALID_ORDER_NUMBER
    assert store.notes == []
    assert store.orders[100].payment_status == PaymentStatus.PENDING


@pytest.mark.asyncio
async def test_order_number_tolerates_whitespace_and_sign(payment_service, store, placed_order):
    outcome = await payment_service.handle_notification(_params(trnOrderNumber=" +100 "))
    assert outcome is NotificationOutcome.MARKED_AS_PAID


@pytest.mark.parametrize("amount", ["", "abc", "NaN", "Infinity", "19,99"])
@pytest.mark.asyncio
async def test_invalid_amount_keeps_note_but_not_state(payment_service, store, placed_order, log_events, amount):
    outcome = await payment_service.handle_notification(_params(trnAmount=amount, messageText="Declined"))

    assert outcome is NotificationOutcome.INVALID_AMOUNT
    assert len(store.notes_for(100)) == 1
    assert store.orders[100].payment_status == PaymentStatus.PENDING
    errors = [e for e in log_events("error") if e["event"] == "bambora_notification_invalid_amount"]
    assert errors[0]["message_text"] == "Declined"
    assert errors[0]["order_id"] == 100


@pytest.mark.asyncio
async def test_declined_notification_is_not_an_error(payment_service, store, placed_order, log_events):
    outcome = await payment_service.handle_notification(_params(trnApproved="0", messageText="DECLINE"))

    assert outcome is NotificationOutcome.NOT_APPROVED
    assert store.orders[100].payment_status == PaymentStatus.PENDING
    assert len(store.notes_for(100)) == 1
    assert log_events("error") == []


@pytest.mark.asyncio
async def test_missing_optional_fields_are_empty(payment_service, store, placed_order):
    params = _params()
    del params["avsMessage"]
    del params["cardType"]

    outcome = await payment_service.handle_notification(params)

    assert outcome is NotificationOutcome.MARKED_AS_PAID
    note = store.notes_for(100)[0].note
    assert "avsMessage: \n" in note
    assert "cardType: \n" in note


@pytest.mark.parametrize(
    "order_status,payment_status",
    [
        (OrderStatus.CANCELLED, PaymentStatus.PENDING),
        (OrderStatus.PROCESSING, PaymentStatus.REFUNDED),
        (OrderStatus.PROCESSING, PaymentStatus.VOIDED),
    ],
)
@pytest.mark.asyncio
async def test_ineligible_order_is_not_marked_paid(payment_service, store, order_status, payment_status):
    store.add_order(
        Order(id=100, order_total=Decimal("19.99"), order_status=order_status, payment_status=payment_status)
    )

    outcome = await payment_service.handle_notification(_params())

    assert outcome is NotificationOutcome.NOT_PAYABLE
    assert store.orders[100].payment_status == payment_status
    assert store.orders[100].authorization_transaction_id is None


@pytest.mark.asyncio
async def test_storage_failure_is_contained(payment_service, store, placed_order, log_events):
    class _BrokenNotes(list):
        def append(self, item):
            raise RuntimeError("database unavailable")

    store.notes = _BrokenNotes()

    outcome = await payment_service.handle_notification(_params())

    assert outcome is NotificationOutcome.FAILED
    assert store.orders[100].payment_status == PaymentStatus.PENDING
    assert any(e["event"] == "bambora_notification_failed" for e in log_events("error"))


@pytest.mark.asyncio
async def test_paid_date_uses_utc(payment_service, store, placed_order):
    await payment_service.handle_notification(_params())
    assert store.orders[100].paid_date_utc.tzinfo == timezone.utc
    assert store.orders[100].paid_date_utc <= datetime.now(timezone.utc)


@pytest.mark.asyncio
async def test_note_survives_a_failed_paid_transition(payment_service, store, placed_order, monkeypatch):
    from domain.order.service import OrderProcessingService

    async def _fail(self, order, now=None):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(OrderProcessingService, "mark_order_as_paid", _fail)

    outcome = await payment_service.handle_notification(_params())

    assert outcome is NotificationOutcome.FAILED
    notes = store.notes_for(100)
    assert len(notes) == 1
    assert notes[0].note.startswith("Bambora response notification:")
    order = store.orders[100]
    assert order.payment_status == PaymentStatus.PENDING
    assert order.authorization_transaction_id is None
    assert store.rollbacks == 1


@pytest.mark.parametrize("amount", ["19_99", "1.999E1", "1E+999999", "9" * 40])
@pytest.mark.asyncio
async def test_non_plain_amounts_are_invalid(payment_service, store, placed_order, log_events, amount):
    outcome = await payment_service.handle_notification(_params(trnAmount=amount))

    assert outcome is NotificationOutcome.INVALID_AMOUNT
    assert store.orders[100].payment_status == PaymentStatus.PENDING
    assert not any(e["event"] == "bambora_notification_failed" for e in log_events())
