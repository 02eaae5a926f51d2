"""
Directory repositories - read-only lookups used to build the billing contact
"""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from domain.directory.entity import Address, Country, StateProvince
from domain.directory.repository import (
    AddressRepository,
    CountryRepository,
    StateProvinceRepository,
)
from infrastructure.models.directory import AddressModel, CountryModel, StateProvinceModel


class SQLAlchemyAddressRepository(AddressRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, address_id: int) -> Optional[Address]:
        result = await self.session.execute(
            select(AddressModel).where(AddressModel.id == address_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return Address(
            id=model.id,
            first_name=model.first_name,
            last_name=model.last_name,
            email=model.email,
            phone_number=model.phone_number,
            address1=model.address1,
            address2=model.address2,
            city=model.city,
            zip_postal_code=model.zip_postal_code,
            state_province_id=model.state_province_id,
            country_id=model.country_id,
        )


class SQLAlchemyCountryRepository(CountryRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, country_id: int) -> Optional[Country]:
        result = await self.session.execute(
            select(CountryModel).where(CountryModel.id == country_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return Country(id=model.id, name=model.name, two_letter_iso_code=model.two_letter_iso_code)


class SQLAlchemyStateProvinceRepository(StateProvinceRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, state_province_id: int) -> Optional[StateProvince]:
        result = await self.session.execute(
            select(StateProvinceModel).where(StateProvinceModel.id == state_province_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return StateProvince(
            id=model.id,
            country_id=model.country_id,
            name=model.name,
            abbreviation=model.abbreviation,
        )
