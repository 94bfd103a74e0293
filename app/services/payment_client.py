# app/services/payment_client.py
from typing import Any, Dict

import requests

from app.utils.settings import PAYMENT_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or PAYMENT_SERVICE_URL).rstrip("/")
        self.timeout = timeout or HTTP_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def create_session(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/payments/create-payment-session"
        logger.info(f"PaymentClient POST {url} order={payload.get('order_id')}")

        resp = self.session.post(url, json=payload, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        self.session.close()
