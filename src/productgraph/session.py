from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable

from .catalog.fetch import CatalogError
from .catalog.models import Product, product_url
from .graph.build import DEFAULT_NODE_WEIGHT, DEFAULT_SINGLETON_COLOR, build_graph
from .graph.extract import KeywordNormalizer
from .graph.model import Graph, Link, Node
from .graph.query import items_for_keyword, items_for_link


logger = logging.getLogger(__name__)

# Called with the current filter text; returns the (already filtered) catalog.
ProductLoader = Callable[[str], list[Product]]


class LoadStatus(str, Enum):
    LOADED = "loaded"
    # The catalog could not be fetched; see `GraphSession.last_error`.
    FAILED = "failed"
    # Another load was running; nothing changed.
    BUSY = "busy"


class GraphSession:
    """Holds the current graph snapshot and selection for one interactive caller.

    `load()` fetches the catalog and rebuilds the graph from scratch. A load
    requested while another one is running does nothing.
    """

    def __init__(
        self,
        *,
        loader: ProductLoader,
        normalizer: KeywordNormalizer | None = None,
        unit_weight: int = DEFAULT_NODE_WEIGHT,
        singleton_color: str | None = DEFAULT_SINGLETON_COLOR,
        product_base_url: str = "",
    ):
        self.loader = loader
        self.normalizer = normalizer
        self.unit_weight = int(unit_weight)
        self.singleton_color = singleton_color
        self.product_base_url = product_base_url

        self.filter_text = ""
        self.last_error: str | None = None

        self._graph = Graph()
        self._selected: list[Product] = []
        self._lock = threading.Lock()

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._graph.nodes

    @property
    def links(self) -> tuple[Link, ...]:
        return self._graph.links

    @property
    def selected_products(self) -> list[Product]:
        return list(self._selected)

    def load(self, *, filter_text: str | None = None) -> LoadStatus:
        """Reload the catalog and rebuild the graph.

        `filter_text`, when given, replaces the session filter once the load
        owns the guard, so a rejected reload never changes it.
        """
        if not self._lock.acquire(blocking=False):
            logger.info("Load already in progress; ignoring reload request")
            return LoadStatus.BUSY

        try:
            if filter_text is not None:
                self.filter_text = filter_text
            self._graph = Graph()
            self._selected = []
            self.last_error = None

            try:
                products = self.loader(self.filter_text)
            except CatalogError as e:
                logger.warning("Catalog load failed: %s", e)
                self.last_error = str(e)
                return LoadStatus.FAILED

            self._graph = build_graph(
                products,
                normalizer=self.normalizer,
                unit_weight=self.unit_weight,
                singleton_color=self.singleton_color,
            )
            logger.info("Loaded %d products into %d nodes", len(products), len(self._graph.nodes))
            return LoadStatus.LOADED
        finally:
            self._lock.release()

    def select_node(self, keyword: str) -> list[Product]:
        self._selected = items_for_keyword(self._graph, keyword)
        return self.selected_products

    def select_link(self, keyword1: str, keyword2: str) -> list[Product]:
        self._selected = items_for_link(self._graph, keyword1, keyword2)
        return self.selected_products

    def product_link(self, product: Product) -> str:
        return product_url(self.product_base_url, product)
