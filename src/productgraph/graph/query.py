from __future__ import annotations

from typing import Any, Iterable

from ..catalog.models import Product
from .model import Graph


def _dedup_by_url(products: Iterable[Product]) -> list[Product]:
    seen: set[str] = set()
    out: list[Product] = []
    for p in products:
        if p.url in seen:
            continue
        seen.add(p.url)
        out.append(p)
    return out


def items_for_keyword(graph: Graph, keyword: str) -> list[Product]:
    """Products that produced `keyword`, unique by url, first occurrence first."""
    return _dedup_by_url(graph.index.get(keyword, ()))


def items_for_link(graph: Graph, keyword1: str, keyword2: str) -> list[Product]:
    """Products that produced both keywords, in the order of `keyword1`'s list."""
    first = items_for_keyword(graph, keyword1)
    if not first:
        return []
    second = {p.url for p in items_for_keyword(graph, keyword2)}
    return [p for p in first if p.url in second]


def neighbors(graph: Graph, keyword: str) -> list[str]:
    # Link order; self-links are not neighbors.
    out: list[str] = []
    for l in graph.links:
        if l.is_self_link:
            continue
        if l.source == keyword:
            other = l.target
        elif l.target == keyword:
            other = l.source
        else:
            continue
        if other not in out:
            out.append(other)
    return out


def query_keyword(graph: Graph, keyword: str) -> dict[str, Any]:
    node = graph.node(keyword)
    return {
        "keyword": keyword,
        "node": node.to_dict() if node is not None else None,
        "neighbors": neighbors(graph, keyword),
        "products": items_for_keyword(graph, keyword),
    }
