"""
Address and directory entities resolved for the billing contact.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Address:
    id: Optional[int]
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    zip_postal_code: Optional[str] = None
    state_province_id: Optional[int] = None
    country_id: Optional[int] = None


@dataclass
class Country:
    id: Optional[int]
    name: str
    two_letter_iso_code: Optional[str] = None


@dataclass
class StateProvince:
    id: Optional[int]
    country_id: Optional[int]
    name: str
    abbreviation: Optional[str] = None
