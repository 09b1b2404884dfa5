from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..catalog.models import Product


@dataclass(frozen=True)
class Node:
    id: str
    # Visual sizing weight, not a product count.
    weight: int
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        # The renderer calls the weight "size"; color is only sent when set.
        d: dict[str, Any] = {"id": self.id, "size": self.weight}
        if self.color is not None:
            d["color"] = self.color
        return d


@dataclass(frozen=True)
class Link:
    source: str
    target: str
    # Title of the product that first produced this pair.
    label: str

    @property
    def is_self_link(self) -> bool:
        return self.source == self.target

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "target": self.target, "label": self.label}


@dataclass(frozen=True)
class Graph:
    nodes: tuple[Node, ...] = ()
    links: tuple[Link, ...] = ()
    # keyword -> products in insertion order, duplicates included
    index: Mapping[str, tuple[Product, ...]] = field(default_factory=dict)

    def node(self, keyword: str) -> Node | None:
        return next((n for n in self.nodes if n.id == keyword), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [l.to_dict() for l in self.links],
        }
