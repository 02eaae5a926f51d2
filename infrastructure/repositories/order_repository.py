"""
Order repository - SQLAlchemy data access for orders and their notes
"""
from typing import List, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from domain.order.entity import Order, OrderNote, OrderStatus, PaymentStatus
from domain.order.repository import OrderRepository
from infrastructure.models.order import OrderModel, OrderNoteModel
from core.logging_config import get_logger


logger = get_logger(__name__)


class SQLAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of the order repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: OrderModel) -> Order:
        return Order(
            id=model.id,
            order_total=Decimal(str(model.order_total)),
            billing_address_id=model.billing_address_id,
            order_status=OrderStatus(model.order_status),
            payment_status=PaymentStatus(model.payment_status),
            authorization_transaction_id=model.authorization_transaction_id,
            created_on_utc=model.created_on_utc,
            paid_date_utc=model.paid_date_utc,
            deleted=bool(model.deleted),
        )

    def _note_to_entity(self, model: OrderNoteModel) -> OrderNote:
        return OrderNote(
            id=model.id,
            order_id=model.order_id,
            note=model.note,
            display_to_customer=model.display_to_customer,
            created_on_utc=model.created_on_utc,
        )

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.id == order_id)
        )
        db_order = result.scalar_one_or_none()
        return self._to_entity(db_order) if db_order else None

    async def update(self, order: Order) -> Order:
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.id == order.id)
        )
        db_order = result.scalar_one_or_none()

        if not db_order:
            raise ValueError(f"Order with id {order.id} not found")

        db_order.order_status = order.order_status.value
        db_order.payment_status = order.payment_status.value
        db_order.authorization_transaction_id = order.authorization_transaction_id
        db_order.paid_date_utc = order.paid_date_utc

        await self.session.flush()
        await self.session.refresh(db_order)

        logger.info(
            "order_updated",
            order_id=db_order.id,
            order_status=db_order.order_status,
            payment_status=db_order.payment_status,
        )
        return self._to_entity(db_order)

    async def add_note(self, note: OrderNote) -> OrderNote:
        db_note = OrderNoteModel(
            order_id=note.order_id,
            note=note.note,
            display_to_customer=note.display_to_customer,
            created_on_utc=note.created_on_utc,
        )
        self.session.add(db_note)
        await self.session.flush()
        await self.session.refresh(db_note)
        return self._note_to_entity(db_note)

    async def list_notes(self, order_id: int) -> List[OrderNote]:
        result = await self.session.execute(
            select(OrderNoteModel)
            .where(OrderNoteModel.order_id == order_id)
            .order_by(OrderNoteModel.created_on_utc, OrderNoteModel.id)
        )
        return [self._note_to_entity(m) for m in result.scalars().all()]
