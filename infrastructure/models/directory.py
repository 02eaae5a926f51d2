"""
Directory database models - addresses, countries and states
"""
from sqlalchemy import Column, Integer, String, ForeignKey

from .base import Base


class CountryModel(Base):
    __tablename__ = "countries"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    two_letter_iso_code = Column(String(2), nullable=True, index=True, comment="ISO-3166 alpha-2")


class StateProvinceModel(Base):
    __tablename__ = "state_provinces"

    id = Column(Integer, primary_key=True, index=True)
    country_id = Column(Integer, ForeignKey("countries.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    abbreviation = Column(String(100), nullable=True)


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    address1 = Column(String(255), nullable=True)
    address2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    zip_postal_code = Column(String(20), nullable=True)
    state_province_id = Column(Integer, ForeignKey("state_provinces.id", ondelete="SET NULL"), nullable=True)
    country_id = Column(Integer, ForeignKey("countries.id", ondelete="SET NULL"), nullable=True)

    def __repr__(self):
        return f"<Address(id={self.id}, city={self.city})>"
