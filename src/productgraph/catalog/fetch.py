from __future__ import annotations

import logging

import httpx

from .models import Product
from .parse import parse_products


logger = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    pass


class CatalogClient:
    def __init__(
        self,
        *,
        base_url: str,
        path: str = "/services-html",
        timeout_s: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.path = "/" + path.lstrip("/")
        self.timeout_s = float(timeout_s)
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    def fetch_html(self) -> str:
        logger.info("Fetching catalog from %s", self.url)
        try:
            with httpx.Client(timeout=self.timeout_s, transport=self.transport) as client:
                r = client.get(self.url)
        except httpx.HTTPError as e:
            raise CatalogError(f"Failed to reach catalog backend at {self.url}. Is it running? ({e})") from e

        if r.status_code != 200:
            raise CatalogError(f"Catalog backend error {r.status_code}: {r.text[:200]}")
        return r.text

    def fetch_products(self, *, filter_text: str | None = None) -> list[Product]:
        products = parse_products(self.fetch_html(), filter_text=filter_text)
        logger.info("Scraped %d products (filter=%r)", len(products), filter_text or "")
        return products
