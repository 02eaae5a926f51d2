import hashlib
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.common.exceptions import OrderNotFoundException, PaymentRePostNotAllowedException
from domain.directory.entity import Address, Country, StateProvince
from domain.order.entity import Order, OrderStatus, PaymentStatus


@pytest.fixture
def billing_address(store) -> Address:
    store.countries[1] = Country(id=1, name="Canada", two_letter_iso_code="CA")
    store.states[7] = StateProvince(id=7, country_id=1, name="British Columbia", abbreviation="BC")
    address = Address(
        id=5,
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        phone_number="5550100",
        address1="1 Main St",
        city="Victoria",
        zip_postal_code="V8W 1A1",
        state_province_id=7,
        country_id=1,
    )
    store.addresses[5] = address
    return address


@pytest.mark.asyncio
async def test_redirect_without_billing_address(payment_service, placed_order):
    redirect = await payment_service.post_process_payment(100)

    assert redirect.query_string == "merchant_id=M1&trnOrderNumber=100&trnAmount=19.99"
    expected = hashlib.md5(b"merchant_id=M1&trnOrderNumber=100&trnAmount=19.99secret").hexdigest()
    assert redirect.url.endswith(f"&hashValue={expected}")


@pytest.mark.asyncio
async def test_redirect_resolves_billing_contact(payment_service, store, billing_address):
    store.add_order(Order(id=100, order_total=Decimal("19.99"), billing_address_id=5))

    redirect = await payment_service.post_process_payment(100)

    assert redirect.query_string == (
        "merchant_id=M1&trnOrderNumber=100&trnAmount=19.99"
        "&ordName=Jane+Doe&ordEmailAddress=jane%40example.com&ordPhoneNumber=5550100"
        "&ordAddress1=1+Main+St&ordAddress2=&ordCity=Victoria"
        "&ordProvince=BC&ordCountry=CA&ordPostalCode=V8W+1A1"
    )


@pytest.mark.asyncio
async def test_unresolved_state_and_country_are_sent_empty(payment_service, store, billing_address):
    store.states.clear()
    store.countries.clear()
    store.add_order(Order(id=100, order_total=Decimal("19.99"), billing_address_id=5))

    redirect = await payment_service.post_process_payment(100)

    assert "&ordProvince=&ordCountry=&" in redirect.query_string


@pytest.mark.asyncio
async def test_missing_billing_address_record_signs_order_fields_only(payment_service, store):
    store.add_order(Order(id=100, order_total=Decimal("19.99"), billing_address_id=404))

    redirect = await payment_service.post_process_payment(100)

    assert redirect.query_string == "merchant_id=M1&trnOrderNumber=100&trnAmount=19.99"


@pytest.mark.asyncio
async def test_redirect_for_unknown_order_raises(payment_service):
    with pytest.raises(OrderNotFoundException):
        await payment_service.post_process_payment(12345)


@pytest.mark.asyncio
async def test_repost_allowed_after_delay(payment_service, placed_order):
    redirect = await payment_service.repost_payment(100)
    assert "trnOrderNumber=100" in redirect.query_string


@pytest.mark.asyncio
async def test_repost_rejected_right_after_placing(payment_service, store):
    now = datetime.now(timezone.utc)
    store.add_order(Order(id=100, order_total=Decimal("19.99"), created_on_utc=now - timedelta(seconds=2)))

    with pytest.raises(PaymentRePostNotAllowedException):
        await payment_service.repost_payment(100, now=now)

    redirect = await payment_service.repost_payment(100, now=now + timedelta(seconds=3))
    assert redirect.hash_value


@pytest.mark.parametrize(
    "changes",
    [
        {"deleted": True},
        {"order_status": OrderStatus.CANCELLED},
        {"payment_status": PaymentStatus.PAID},
        {"payment_status": PaymentStatus.AUTHORIZED},
    ],
)
@pytest.mark.asyncio
async def test_repost_rejected_for_ineligible_order(payment_service, store, changes):
    created = datetime.now(timezone.utc) - timedelta(hours=1)
    store.add_order(Order(id=100, order_total=Decimal("19.99"), created_on_utc=created, **changes))

    with pytest.raises(PaymentRePostNotAllowedException):
        await payment_service.repost_payment(100)


@pytest.mark.asyncio
async def test_repost_for_unknown_order_raises(payment_service):
    with pytest.raises(OrderNotFoundException):
        await payment_service.repost_payment(404)
