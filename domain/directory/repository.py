"""
Directory repository interfaces - address, country and state lookups
"""
from abc import ABC, abstractmethod
from typing import Optional

from .entity import Address, Country, StateProvince


class AddressRepository(ABC):

    @abstractmethod
    async def get_by_id(self, address_id: int) -> Optional[Address]:
        pass


class CountryRepository(ABC):

    @abstractmethod
    async def get_by_id(self, country_id: int) -> Optional[Country]:
        pass


class StateProvinceRepository(ABC):

    @abstractmethod
    async def get_by_id(self, state_province_id: int) -> Optional[StateProvince]:
        pass
