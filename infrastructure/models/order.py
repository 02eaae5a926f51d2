"""
Order database models - SQLAlchemy ORM mapping
Note: an infrastructure detail, not the domain model
"""
from sqlalchemy import (
    Column, Integer, String, Numeric, DateTime, Text, Boolean,
    Index, ForeignKey
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from .base import Base


class OrderModel(Base):
    """
    Order table

    Plain mapping without business logic;
    the rules live in domain.order.entity.Order
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    # Exact amounts are stored as Numeric
    order_total = Column(Numeric(precision=18, scale=4), nullable=False, comment="Order total")

    billing_address_id = Column(
        Integer,
        ForeignKey("addresses.id", ondelete="SET NULL"),
        nullable=True,
        comment="Billing address"
    )

    order_status = Column(
        String(50),
        nullable=False,
        default="pending",
        index=True,
        comment="Order status: pending/processing/complete/cancelled"
    )
    payment_status = Column(
        String(50),
        nullable=False,
        default="pending",
        index=True,
        comment="Payment status: pending/authorized/paid/partially_refunded/refunded/voided"
    )
    authorization_transaction_id = Column(String(200), nullable=True, comment="Gateway transaction id")

    created_on_utc = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="Placed at"
    )
    paid_date_utc = Column(DateTime(timezone=True), nullable=True, comment="Paid at")
    deleted = Column(Boolean, nullable=False, default=False)

    notes = relationship("OrderNoteModel", back_populates="order", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_order_status_payment", "order_status", "payment_status"),
    )

    def __repr__(self):
        return f"<Order(id={self.id}, total={self.order_total}, payment_status={self.payment_status})>"


class OrderNoteModel(Base):
    """Order note table, append-only"""
    __tablename__ = "order_notes"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Order"
    )
    note = Column(Text, nullable=False)
    display_to_customer = Column(Boolean, nullable=False, default=False)
    created_on_utc = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    order = relationship("OrderModel", back_populates="notes")

    def __repr__(self):
        return f"<OrderNote(id={self.id}, order_id={self.order_id})>"
