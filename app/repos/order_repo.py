# app/repos/order_repo.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel, OrderStatus
from app.data.models.order_item import OrderItemModel
from app.data.models.order_receipt import OrderReceiptModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def create_order(
        self,
        total_amount: Decimal,
        total_items: int,
        items: List[Dict[str, Any]],
    ) -> OrderModel:
        # zamowienie + pozycje w jednym commicie, wszystko albo nic
        order = OrderModel(
            total_amount=total_amount,
            total_items=total_items,
            items=[
                OrderItemModel(
                    product_id=i["product_id"],
                    quantity=i["quantity"],
                    price=i["price"],
                )
                for i in items
            ],
        )
        self.db.add(order)
        self._commit()
        self.db.refresh(order)
        return order

    def _filtered(self, stmt, status: OrderStatus | None):
        if status is not None:
            stmt = stmt.where(OrderModel.status == status)
        return stmt

    def count_orders(self, status: OrderStatus | None = None) -> int:
        stmt = self._filtered(select(func.count()).select_from(OrderModel), status)
        return self.db.execute(stmt).scalar_one()

    def list_orders(self, status: OrderStatus | None, skip: int, take: int) -> List[OrderModel]:
        stmt = (
            self._filtered(select(OrderModel), status)
            .order_by(OrderModel.created_at, OrderModel.id)
            .offset(skip)
            .limit(take)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def update_order_status(self, order_id: str, status: OrderStatus) -> OrderModel | None:
        order = self.db.get(OrderModel, order_id)
        if order:
            order.status = status
            self._commit()
            self.db.refresh(order)
        return order

    def mark_paid(self, order_id: str, stripe_charge_id: str, receipt_url: str) -> OrderModel | None:
        """
        Status PAID, flaga paid, paid_at, id obciazenia i paragon zmieniaja sie razem.
        Powtorne potwierdzenie nadpisuje pola i url istniejacego paragonu.
        """
        order = self.db.get(OrderModel, order_id)
        if not order:
            return None

        order.status = OrderStatus.PAID
        order.paid = True
        order.paid_at = datetime.now(timezone.utc)
        order.stripe_charge_id = stripe_charge_id

        if order.receipt is None:
            order.receipt = OrderReceiptModel(receipt_url=receipt_url)
        else:
            order.receipt.receipt_url = receipt_url

        self._commit()
        self.db.refresh(order)
        return order
