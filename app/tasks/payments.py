# app/tasks/payments.py
from celery.signals import worker_process_init, worker_process_shutdown
from sqlalchemy.orm import sessionmaker

from app.celery_worker import celery_app
from app.data.database import build_engine, build_session_factory
from app.services.order_service import OrderService
from app.utils.settings import DATABASE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

# engine i fabryka sesji na proces workera
_state = {"engine": None, "session_factory": None}


def configure_session_factory(session_factory: sessionmaker) -> None:
    _state["session_factory"] = session_factory


@worker_process_init.connect
def init_worker_db(**kwargs):
    engine = build_engine(DATABASE_URL)
    _state["engine"] = engine
    configure_session_factory(build_session_factory(engine))
    logger.info("Worker database engine initialized")


@worker_process_shutdown.connect
def close_worker_db(**kwargs):
    engine = _state["engine"]
    if engine is not None:
        engine.dispose()
        logger.info("Worker database engine disposed")


@celery_app.task(name="payment.succeeded")
def payment_succeeded_task(order_id: str, stripe_payment_id: str, receipt_url: str):
    """
    Zdarzenie z payment-service: platnosc za zamowienie potwierdzona.
    Powtorne dostarczenie nadpisuje dane platnosci (last write wins).
    """
    logger.info(f"payment.succeeded received for order {order_id}")

    session_factory = _state["session_factory"]
    if session_factory is None:
        raise RuntimeError("Worker database is not initialized")

    db = session_factory()
    try:
        order = OrderService(db).mark_paid(
            order_id=order_id,
            stripe_payment_id=stripe_payment_id,
            receipt_url=receipt_url,
        )
    finally:
        db.close()

    return {"order_id": order["id"], "status": order["status"].value, "paid": order["paid"]}
