from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    # Site-relative link, e.g. "/en-us/products/virtual-machines/". Identity.
    url: str
    title: str

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "title": self.title}


def product_url(base_url: str, product: Product) -> str:
    """Absolute link for a product, given the site it was scraped from."""
    if product.url.startswith(("http://", "https://")):
        return product.url
    return base_url.rstrip("/") + "/" + product.url.lstrip("/")
