"""Catalog source: where the (url, title) pairs come from.

The listing page is scraped for product links, deduplicated by url and
optionally filtered by title. A fetched catalog can be cached in SQLite so the
graph can be rebuilt without hitting the network again.
"""

from .models import Product

__all__ = ["Product"]
