from __future__ import annotations

from types import MappingProxyType

from ..catalog.models import Product
from .model import Graph, Link, Node


def link_key(a: str, b: str) -> tuple[str, str]:
    # Links are undirected: (a, b) and (b, a) share one key.
    if a > b:
        a, b = b, a
    return a, b


class GraphStore:
    """Accumulates nodes, links and the keyword index for one catalog snapshot.

    Insertion order is discovery order. `snapshot()` freezes the current state
    into a `Graph`; the store is meant to be thrown away afterwards.
    """

    def __init__(self) -> None:
        self._weights: dict[str, int] = {}
        self._colors: dict[str, str] = {}
        self._links: dict[tuple[str, str], Link] = {}
        self._index: dict[str, list[Product]] = {}

    def upsert_node(self, keyword: str, *, weight: int, color: str | None = None) -> bool:
        """Add `weight` to the node, creating it if needed. Returns True if created.

        `color` only applies to a node created by this call.
        """
        prev = self._weights.get(keyword)
        if prev is not None:
            self._weights[keyword] = prev + int(weight)
            return False

        self._weights[keyword] = int(weight)
        if color is not None:
            self._colors[keyword] = color
        return True

    def upsert_link(self, a: str, b: str, *, label: str) -> bool:
        """Insert the link unless the pair is already linked. Returns True if inserted."""
        key = link_key(a, b)
        if key in self._links:
            return False
        self._links[key] = Link(source=a, target=b, label=label)
        return True

    def add_product_keyword(self, keyword: str, product: Product) -> None:
        self._index.setdefault(keyword, []).append(product)

    def snapshot(self) -> Graph:
        nodes = tuple(Node(id=k, weight=w, color=self._colors.get(k)) for k, w in self._weights.items())
        index = MappingProxyType({k: tuple(v) for k, v in self._index.items()})
        return Graph(nodes=nodes, links=tuple(self._links.values()), index=index)
