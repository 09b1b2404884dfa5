"""Keyword co-occurrence graph over a product catalog.

Every product title is split into keywords; each keyword becomes a node and
each pair of adjacent keywords becomes a link. Node weights grow with every
occurrence so frequent keywords render larger. The graph is rebuilt from
scratch for every catalog snapshot.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..catalog.models import Product
from .extract import DEFAULT_NORMALIZER, KeywordNormalizer
from .model import Graph
from .store import GraphStore


logger = logging.getLogger(__name__)

DEFAULT_NODE_WEIGHT = 200
DEFAULT_SINGLETON_COLOR = "lightgrey"


def build_graph(
    products: Iterable[Product],
    *,
    normalizer: KeywordNormalizer | None = None,
    unit_weight: int = DEFAULT_NODE_WEIGHT,
    singleton_color: str | None = DEFAULT_SINGLETON_COLOR,
) -> Graph:
    """Build the keyword graph and keyword -> products index."""
    normalizer = normalizer or DEFAULT_NORMALIZER
    store = GraphStore()

    products_seen = 0
    products_with_keywords = 0

    for product in products:
        products_seen += 1
        title = getattr(product, "title", None)
        keywords = normalizer.normalize(title)
        if not keywords:
            continue
        products_with_keywords += 1

        if len(keywords) == 1:
            # The renderer can't draw a node without a link, so a
            # single-keyword title gets a self-link.
            kw = keywords[0]
            store.upsert_node(kw, weight=unit_weight, color=singleton_color or None)
            store.upsert_link(kw, kw, label=title)
            store.add_product_keyword(kw, product)
            continue

        prev: str | None = None
        for kw in keywords:
            store.upsert_node(kw, weight=unit_weight)
            if prev is not None:
                store.upsert_link(prev, kw, label=title)
            prev = kw
            store.add_product_keyword(kw, product)

    graph = store.snapshot()
    logger.debug(
        "Built graph: %d products (%d with keywords), %d nodes, %d links",
        products_seen,
        products_with_keywords,
        len(graph.nodes),
        len(graph.links),
    )
    return graph


def graph_stats(graph: Graph) -> dict[str, Any]:
    urls = {p.url for products in graph.index.values() for p in products}
    return {
        "nodes": len(graph.nodes),
        "links": len(graph.links),
        "self_links": sum(1 for l in graph.links if l.is_self_link),
        "products_indexed": len(urls),
        "total_weight": sum(n.weight for n in graph.nodes),
    }
