"""
payment.succeeded Celery task, executed synchronously against SQLite.
"""
import pytest
from sqlalchemy import select

from app.data.models import OrderModel, OrderReceiptModel, OrderStatus
from app.domain.errors import OrderNotFoundError
from app.tasks import payments
from app.tasks.payments import payment_succeeded_task


@pytest.fixture
def worker_db(monkeypatch, session_factory):
    monkeypatch.setitem(payments._state, "session_factory", session_factory)
    return session_factory


def test_task_is_registered_under_event_name():
    assert payment_succeeded_task.name == "payment.succeeded"


def test_payment_succeeded_marks_order_paid(worker_db, service, db):
    order = service.create_order([{"product_id": 1, "quantity": 1}])

    result = payment_succeeded_task(
        order_id=order["id"],
        stripe_payment_id="ch_42",
        receipt_url="https://pay.stripe.com/receipts/42",
    )

    assert result == {"order_id": order["id"], "status": "PAID", "paid": True}

    db.expire_all()
    stored = db.get(OrderModel, order["id"])
    assert stored.status == OrderStatus.PAID
    assert stored.paid is True
    assert stored.paid_at is not None
    assert stored.stripe_charge_id == "ch_42"
    receipts = db.execute(
        select(OrderReceiptModel).where(OrderReceiptModel.order_id == order["id"])
    ).scalars().all()
    assert len(receipts) == 1


def test_payment_succeeded_unknown_order(worker_db):
    with pytest.raises(OrderNotFoundError):
        payment_succeeded_task(
            order_id="missing",
            stripe_payment_id="ch_1",
            receipt_url="https://pay.stripe.com/receipts/1",
        )


def test_worker_without_database(monkeypatch):
    monkeypatch.setitem(payments._state, "session_factory", None)

    with pytest.raises(RuntimeError):
        payment_succeeded_task(order_id="o", stripe_payment_id="ch", receipt_url="u")
