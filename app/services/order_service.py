# app/services/order_service.py
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List

from requests import HTTPError, RequestException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel, OrderStatus
from app.domain.errors import (
    InvalidProductsError,
    OrderNotFoundError,
    OrderValidationError,
    ServiceUnavailableError,
)
from app.repos.order_repo import OrderRepo
from app.services.payment_client import PaymentClient
from app.services.product_client import ProductClient
from app.utils.settings import PAYMENT_CURRENCY
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.

    Sklada wywolania product-service, repozytorium i payment-service.
    Nazwy produktow nie sa zapisywane w bazie, dokladane sa przy odczycie.
    Klienci HTTP sa wspoldzieleni w procesie i wstrzykiwani z zewnatrz,
    worker celery potwierdzajacy platnosci nie potrzebuje zadnego z nich.
    """

    def __init__(
        self,
        db: Session,
        product_client: ProductClient | None = None,
        payment_client: PaymentClient | None = None,
    ):
        self.repo = OrderRepo(db)
        self.product_client = product_client
        self.payment_client = payment_client

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_order(self, items: List[Dict[str, int]]) -> Dict[str, Any]:
        """
        Use Case: Tworzenie zamówienia.

        1. Waliduje produkty w product-service
        2. Snapshot ceny i nazwy dla kazdej pozycji
        3. Liczy total_amount i total_items po wszystkich pozycjach
        4. Zapisuje zamowienie z pozycjami jednym commitem
        """
        if not items:
            raise OrderValidationError("Order must contain at least one item")
        for item in items:
            if item["quantity"] <= 0:
                raise OrderValidationError("Quantity must be greater than 0")

        try:
            products = self._resolve_products(i["product_id"] for i in items)

            total_amount = Decimal("0.00")
            total_items = 0
            order_items = []

            for item in items:
                product = products[item["product_id"]]
                total_amount += product["price"] * item["quantity"]
                total_items += item["quantity"]
                order_items.append(
                    {
                        "product_id": item["product_id"],
                        "quantity": item["quantity"],
                        "price": product["price"],
                    }
                )

            order = self.repo.create_order(total_amount, total_items, order_items)

        except (InvalidProductsError, RequestException, SQLAlchemyError, KeyError) as e:
            logger.error(f"Order creation failed: {e!r}")
            raise InvalidProductsError() from e

        logger.info(f"Order {order.id} created: {total_items} items, total {total_amount}")
        return self._order_to_dict(order, products)

    def change_status(self, order_id: str, status: OrderStatus) -> Dict[str, Any]:
        """
        Use Case: Zmiana statusu.
        Ten sam status to no-op i zwraca pelne zamowienie, po zmianie zwracany jest
        sam wiersz zamowienia bez pozycji.

        PAID ustawia tylko potwierdzenie platnosci (mark_paid), a oplacone
        zamowienie nie schodzi z PAID, bo paid, paid_at i paragon zostalyby niespojne.
        """
        order = self.get_order(order_id)

        if order["status"] == status:
            logger.info(f"Order {order_id} already has status {status.value}")
            return order

        if status == OrderStatus.PAID:
            raise OrderValidationError("Status PAID is set only by payment confirmation")
        if order["paid"]:
            raise OrderValidationError(f"Order {order_id} is paid, its status cannot be changed")

        updated = self.repo.update_order_status(order_id, status)
        if not updated:
            raise OrderNotFoundError(order_id)

        logger.info(f"Order {order_id} status changed {order['status'].value} -> {status.value}")
        return self._order_row_to_dict(updated)

    def create_payment_session(self, order: Dict[str, Any]) -> Dict[str, Any]:
        """Use Case: Sesja platnosci dla zamowienia z pozycjami (wynik create_order/get_order)."""
        payload = {
            "order_id": order["id"],
            "currency": PAYMENT_CURRENCY,
            "items": [
                {
                    "name": i["name"],
                    "price": float(i["price"]),
                    "quantity": i["quantity"],
                }
                for i in order["items"]
            ],
        }

        try:
            session = self.payment_client.create_session(payload)
        except RequestException as e:
            logger.error(f"Payment session for order {order['id']} failed: {e!r}")
            raise ServiceUnavailableError("Payment service unavailable") from e

        logger.info(f"Payment session created for order {order['id']}")
        return session

    def mark_paid(self, order_id: str, stripe_payment_id: str, receipt_url: str) -> Dict[str, Any]:
        """Use Case: Potwierdzenie platnosci (payment.succeeded)."""
        order = self.repo.mark_paid(order_id, stripe_payment_id, receipt_url)
        if not order:
            raise OrderNotFoundError(order_id)

        logger.info(f"Order {order_id} paid, charge {stripe_payment_id}")
        return self._order_row_to_dict(order)

    # =====================================================
    # QUERY
    # =====================================================
    def list_orders(self, status: OrderStatus | None, page: int, limit: int) -> Dict[str, Any]:
        if page < 1 or limit < 1:
            raise OrderValidationError("Page and limit must be greater than 0")

        total = self.repo.count_orders(status)
        orders = self.repo.list_orders(status, skip=(page - 1) * limit, take=limit)

        return {
            "data": [self._order_row_to_dict(o) for o in orders],
            "meta": {
                "total": total,
                "page": page,
                "last_page": math.ceil(total / limit),
            },
        }

    def get_order(self, order_id: str) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFoundError(order_id)

        try:
            products = self._resolve_products(i.product_id for i in order.items)
        except RequestException as e:
            logger.error(f"Product lookup for order {order_id} failed: {e!r}")
            raise ServiceUnavailableError("Product service unavailable") from e

        return self._order_to_dict(order, products)

    # =====================================================
    # HELPERS
    # =====================================================
    def _resolve_products(self, product_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        """Mapa id -> {name, price}; brak ktoregokolwiek id uniewaznia caly request."""
        requested = set(product_ids)
        found = {}

        try:
            response = self.product_client.validate_products(requested)
        except HTTPError as e:
            # 4xx: product-service odrzucil ktores id, 5xx traktujemy jak niedostepnosc
            if e.response is not None and 400 <= e.response.status_code < 500:
                logger.error(f"Product-service rejected ids {sorted(requested)}: {e!r}")
                raise InvalidProductsError() from e
            raise

        try:
            for p in response:
                found[int(p["id"])] = {
                    "name": p["name"],
                    "price": Decimal(str(p["price"])),
                }
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.error(f"Malformed product-service response: {e!r}")
            raise InvalidProductsError() from e

        missing = requested - found.keys()
        if missing:
            logger.error(f"Products not found: {sorted(missing)}")
            raise InvalidProductsError()

        return found

    @staticmethod
    def _order_row_to_dict(order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "total_amount": order.total_amount,
            "total_items": order.total_items,
            "status": order.status,
            "paid": order.paid,
            "paid_at": order.paid_at,
            "stripe_charge_id": order.stripe_charge_id,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
        }

    def _order_to_dict(self, order: OrderModel, products: Dict[int, Dict[str, Any]]) -> Dict[str, Any]:
        data = self._order_row_to_dict(order)
        data["items"] = [
            {
                "product_id": i.product_id,
                "quantity": i.quantity,
                "price": i.price,
                "name": products[i.product_id]["name"],
            }
            for i in order.items
        ]
        return data
