"""
Order repository interface - what the host must offer for orders and notes
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from .entity import Order, OrderNote


class OrderRepository(ABC):
    """Order repository port"""

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """Load an order; None when it does not exist"""
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """Persist changes of an existing order"""
        pass

    @abstractmethod
    async def add_note(self, note: OrderNote) -> OrderNote:
        """Append a note to an order"""
        pass

    @abstractmethod
    async def list_notes(self, order_id: int) -> List[OrderNote]:
        """Notes of an order, oldest first"""
        pass
