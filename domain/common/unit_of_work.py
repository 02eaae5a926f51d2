"""Unit of Work abstraction"""
from __future__ import annotations

from abc import ABC, abstractmethod

from domain.order.repository import OrderRepository
from domain.directory.repository import (
    AddressRepository,
    CountryRepository,
    StateProvinceRepository,
)


class AbstractUnitOfWork(ABC):
    """Transaction boundary used by application services"""

    order_repository: OrderRepository
    address_repository: AddressRepository
    country_repository: CountryRepository
    state_province_repository: StateProvinceRepository

    def __init__(self, *, readonly: bool = False) -> None:
        self._committed = False
        self._readonly = readonly
        self.order_repository = None  # type: ignore[assignment]
        self.address_repository = None  # type: ignore[assignment]
        self.country_repository = None  # type: ignore[assignment]
        self.state_province_repository = None  # type: ignore[assignment]

    async def __aenter__(self) -> "AbstractUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            # Auto-commit unless read-only or already committed
            if not self._readonly and not self._committed:
                await self.commit()

    @abstractmethod
    async def commit(self) -> None:
        """Commit the transaction"""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Roll the transaction back"""
        ...
