import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    total_amount = Column(Numeric(10, 2), nullable=False)
    total_items = Column(Integer, nullable=False)

    status = Column(Enum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING)

    # ustawiane tylko przy potwierdzeniu platnosci
    paid = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    stripe_charge_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
    )
    receipt = relationship(
        "OrderReceiptModel",
        back_populates="order",
        uselist=False,
        cascade="all, delete-orphan",
    )
