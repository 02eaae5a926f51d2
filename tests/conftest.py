"""Pytest bootstrap configuration and in-memory fakes of the host ports.

Environment variables are set before any module that reads application
settings is imported.
"""
import os
from copy import deepcopy
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional

import pytest

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BAMBORA__MERCHANT_ID", "M1")
os.environ.setdefault("BAMBORA__HASH_KEY", "secret")

from core.settings import BamboraSettings  # noqa: E402
from domain.common.unit_of_work import AbstractUnitOfWork  # noqa: E402
from domain.directory.entity import Address, Country, StateProvince  # noqa: E402
from domain.directory.repository import (  # noqa: E402
    AddressRepository,
    CountryRepository,
    StateProvinceRepository,
)
from domain.order.entity import Order, OrderNote  # noqa: E402
from domain.order.repository import OrderRepository  # noqa: E402


class FakeOrderRepository(OrderRepository):
    """Stages writes until the unit of work commits; hands out copies only."""

    def __init__(self, orders: Dict[int, Order], notes: List[OrderNote]):
        self.orders = orders
        self.notes = notes
        self.pending_orders: Dict[int, Order] = {}
        self.pending_notes: List[OrderNote] = []

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        order = self.pending_orders.get(order_id) or self.orders.get(order_id)
        return deepcopy(order) if order else None

    async def update(self, order: Order) -> Order:
        if order.id not in self.orders:
            raise ValueError(f"Order with id {order.id} not found")
        self.pending_orders[order.id] = deepcopy(order)
        return deepcopy(order)

    async def add_note(self, note: OrderNote) -> OrderNote:
        note.id = len(self.notes) + len(self.pending_notes) + 1
        self.pending_notes.append(deepcopy(note))
        return note

    async def list_notes(self, order_id: int) -> List[OrderNote]:
        return [deepcopy(n) for n in [*self.notes, *self.pending_notes] if n.order_id == order_id]

    def flush_to_store(self) -> None:
        self.orders.update(self.pending_orders)
        for note in self.pending_notes:
            self.notes.append(note)
        self.discard()

    def discard(self) -> None:
        self.pending_orders = {}
        self.pending_notes = []


class _FakeLookup:
    def __init__(self, items: dict):
        self.items = items

    async def get_by_id(self, item_id):
        return self.items.get(item_id)


class FakeAddressRepository(_FakeLookup, AddressRepository):
    pass


class FakeCountryRepository(_FakeLookup, CountryRepository):
    pass


class FakeStateProvinceRepository(_FakeLookup, StateProvinceRepository):
    pass


class FakeStore:
    def __init__(self):
        self.orders: Dict[int, Order] = {}
        self.notes: List[OrderNote] = []
        self.addresses: Dict[int, Address] = {}
        self.countries: Dict[int, Country] = {}
        self.states: Dict[int, StateProvince] = {}
        self.commits = 0
        self.rollbacks = 0

    def add_order(self, order: Order) -> Order:
        self.orders[order.id] = deepcopy(order)
        return order

    def notes_for(self, order_id: int) -> List[OrderNote]:
        return [n for n in self.notes if n.order_id == order_id]


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(self, store: FakeStore, *, readonly: bool = False):
        super().__init__(readonly=readonly)
        self.store = store

    async def __aenter__(self) -> "FakeUnitOfWork":
        self.order_repository = FakeOrderRepository(self.store.orders, self.store.notes)
        self.address_repository = FakeAddressRepository(self.store.addresses)
        self.country_repository = FakeCountryRepository(self.store.countries)
        self.state_province_repository = FakeStateProvinceRepository(self.store.states)
        return self

    async def commit(self) -> None:
        self.order_repository.flush_to_store()
        self.store.commits += 1
        self._committed = True

    async def rollback(self) -> None:
        self.order_repository.discard()
        self.store.rollbacks += 1
        self._committed = False


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def uow_factory(store):
    def factory(readonly: bool = False) -> FakeUnitOfWork:
        return FakeUnitOfWork(store, readonly=readonly)
    return factory


@pytest.fixture
def bambora_settings() -> BamboraSettings:
    return BamboraSettings(merchant_id="M1", hash_key="secret")


@pytest.fixture
def gateway(bambora_settings):
    from infrastructure.external.payments.bambora_client import BamboraClient
    return BamboraClient(bambora_settings)


@pytest.fixture
def payment_service(gateway, uow_factory):
    from application.services.payment_service import PaymentService
    return PaymentService(gateway=gateway, uow_factory=uow_factory)


@pytest.fixture
def placed_order(store) -> Order:
    """Order 100 placed a minute ago, awaiting payment."""
    return store.add_order(
        Order(
            id=100,
            order_total=Decimal("19.99"),
            created_on_utc=datetime.now(timezone.utc) - timedelta(minutes=1),
        )
    )


@pytest.fixture
def log_events(caplog):
    """structlog event dicts captured through the stdlib bridge."""
    def _events(level: Optional[str] = None) -> List[dict]:
        return [
            r.msg for r in caplog.records
            if isinstance(r.msg, dict) and (level is None or r.levelname == level.upper())
        ]
    return _events
