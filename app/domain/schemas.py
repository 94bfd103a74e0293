# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List, Optional
from decimal import Decimal
from datetime import datetime

from app.data.models.order import OrderStatus


class OrderItemIn(BaseModel):
    """Pozycja zamowienia w requescie."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia."""

    items: List[OrderItemIn] = Field(..., min_length=1, description="Co najmniej jedna pozycja")


class ChangeOrderStatusIn(BaseModel):
    status: OrderStatus


class PaidOrderIn(BaseModel):
    """Potwierdzenie platnosci wysylane przez payment-service."""

    order_id: str = Field(..., min_length=1)
    stripe_payment_id: str = Field(..., min_length=1)
    receipt_url: str = Field(..., min_length=1)


class OrderItemOut(BaseModel):
    product_id: int
    quantity: int
    price: Decimal
    name: str


class OrderOut(BaseModel):
    """Schema dla zamówienia bez pozycji (lista, zmiana statusu)."""

    id: str
    total_amount: Decimal
    total_items: int
    status: OrderStatus
    paid: bool
    paid_at: datetime | None = None
    stripe_charge_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderWithItemsOut(OrderOut):
    """Zamowienie z pozycjami uzupelnionymi o nazwy produktow."""

    items: List[OrderItemOut]


class PaginationMeta(BaseModel):
    total: int
    page: int
    last_page: int


class OrderPageOut(BaseModel):
    data: List[OrderOut]
    meta: PaginationMeta


class OrderCreatedOut(BaseModel):
    order: OrderWithItemsOut
    payment_session: Dict[str, Any]


class HealthOut(BaseModel):
    status: str
    service: str
    database: str
    checked_at: Optional[datetime] = None
