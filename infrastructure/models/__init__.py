"""Infrastructure models package exports."""
from .base import Base, metadata
from .directory import AddressModel, CountryModel, StateProvinceModel
from .order import OrderModel, OrderNoteModel

__all__ = [
    "Base",
    "metadata",
    "AddressModel",
    "CountryModel",
    "StateProvinceModel",
    "OrderModel",
    "OrderNoteModel",
]
