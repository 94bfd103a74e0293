# app/api/routers/orders.py
import hmac
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.data.models.order import OrderStatus
from app.domain.errors import OrderServiceError
from app.domain.schemas import (
    ChangeOrderStatusIn,
    OrderCreate,
    OrderCreatedOut,
    OrderOut,
    OrderPageOut,
    OrderWithItemsOut,
    PaidOrderIn,
)
from app.services.order_service import OrderService
from app.utils.settings import INTERNAL_SERVICE_SECRET_HEADER
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(request: Request, db: Session = Depends(get_db)) -> OrderService:
    return OrderService(
        db=db,
        product_client=request.app.state.product_client,
        payment_client=request.app.state.payment_client,
    )


def require_internal_service(request: Request) -> None:
    """Tylko payment-service z poprawnym sekretem w naglowku moze potwierdzac platnosci."""
    expected = request.app.state.internal_secret
    provided = request.headers.get(INTERNAL_SERVICE_SECRET_HEADER, "")

    if not expected or not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning(f"Rejected internal call to {request.url.path}")
        raise HTTPException(status_code=403, detail="Forbidden")


@router.post("/", response_model=OrderCreatedOut, status_code=201)
def create_order(payload: OrderCreate, svc: OrderService = Depends(get_service)):
    """
    Tworzy zamówienie i od razu sesje platnosci dla niego.
    """
    try:
        order = svc.create_order([i.model_dump() for i in payload.items])
        payment_session = svc.create_payment_session(order)
    except OrderServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return {"order": order, "payment_session": payment_session}


@router.get("/", response_model=OrderPageOut)
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.list_orders(status=status, page=page, limit=limit)
    except OrderServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/paid", response_model=OrderOut, dependencies=[Depends(require_internal_service)])
def order_paid(payload: PaidOrderIn, svc: OrderService = Depends(get_service)):
    """
    Webhook payment-service, odpowiednik zdarzenia payment.succeeded.
    """
    try:
        return svc.mark_paid(
            order_id=payload.order_id,
            stripe_payment_id=payload.stripe_payment_id,
            receipt_url=payload.receipt_url,
        )
    except OrderServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{order_id}", response_model=OrderWithItemsOut)
def get_order(order_id: str, svc: OrderService = Depends(get_service)):
    """
    Pobiera szczegóły zamówienia z nazwami produktow.
    """
    try:
        return svc.get_order(order_id)
    except OrderServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{order_id}/status", response_model=Union[OrderWithItemsOut, OrderOut])
def change_order_status(
    order_id: str,
    payload: ChangeOrderStatusIn,
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.change_status(order_id, payload.status)
    except OrderServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
