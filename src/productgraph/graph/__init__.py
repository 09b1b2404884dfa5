"""Keyword graph: normalization, building and selection queries.

Pure in-memory code with no I/O; the catalog, CLI and web layers sit on top.
"""

from .build import build_graph, graph_stats
from .extract import KeywordNormalizer, extract_keywords
from .model import Graph, Link, Node
from .query import items_for_keyword, items_for_link

__all__ = [
    "Graph",
    "KeywordNormalizer",
    "Link",
    "Node",
    "build_graph",
    "extract_keywords",
    "graph_stats",
    "items_for_keyword",
    "items_for_link",
]
