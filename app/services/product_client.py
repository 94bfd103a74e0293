# app/services/product_client.py
from typing import Iterable, List

import requests

from app.utils.settings import PRODUCT_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """
    Klient product-service. Jedna sesja HTTP na proces,
    tworzona w lifespan aplikacji i zamykana przy shutdown.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout or HTTP_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def validate_products(self, product_ids: Iterable[int]) -> List[dict]:
        ids = sorted(set(product_ids))
        url = f"{self.base_url}/products/validate"
        logger.info(f"ProductClient POST {url} ids={ids}")

        resp = self.session.post(url, json={"ids": ids}, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        self.session.close()
