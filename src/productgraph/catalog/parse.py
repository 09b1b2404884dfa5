from __future__ import annotations

import re
from html import unescape
from typing import Iterable

from .models import Product

# Product tiles on the listing page look like:
#   <a href="/en-us/products/..." data-event="area-products-index-clicked-product"
#      data-event-property="Virtual Machines">
_PRODUCT_LINK_RE = re.compile(
    r'<a href="(/[^"]+)" data-event="area-products-index-clicked-product" data-event-property="([^"]+)">',
    re.IGNORECASE,
)


def matches_filter(title: str | None, filter_text: str | None) -> bool:
    # Case-insensitive substring match; an empty filter matches everything.
    if not filter_text:
        return True
    return filter_text.lower() in (title or "").lower()


def filter_products(products: Iterable[Product], filter_text: str | None) -> list[Product]:
    return [p for p in products if matches_filter(p.title, filter_text)]


def parse_products(html: str, *, filter_text: str | None = None) -> list[Product]:
    """Scrape product links from the listing HTML.

    Returns products in document order, unique by url (first occurrence
    wins), restricted to titles containing `filter_text` when given.
    """
    seen: set[str] = set()
    out: list[Product] = []
    for m in _PRODUCT_LINK_RE.finditer(html or ""):
        url = unescape(m.group(1))
        title = unescape(m.group(2))

        if not matches_filter(title, filter_text):
            continue
        if url in seen:
            continue

        seen.add(url)
        out.append(Product(url=url, title=title))
    return out
