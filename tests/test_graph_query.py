import unittest

from productgraph.catalog.models import Product
from productgraph.graph.build import build_graph
from productgraph.graph.query import items_for_keyword, items_for_link, neighbors, query_keyword


class TestGraphQuery(unittest.TestCase):
    def setUp(self):
        self.graph = build_graph(
            [
                Product(url="/a", title="Virtual Machines"),
                Product(url="/b", title="Container Instances"),
                Product(url="/c", title="Machine Learning Studio"),
                Product(url="/d", title="Virtual Machine Scale Sets"),
                Product(url="/e", title="Service Bus Service"),
                Product(url="/x", title="Storage"),
            ]
        )

    def test_items_for_keyword(self):
        self.assertEqual([p.url for p in items_for_keyword(self.graph, "MACHINE")], ["/a", "/c", "/d"])
        self.assertEqual(items_for_keyword(self.graph, "STORAGE"), [Product(url="/x", title="Storage")])

    def test_items_for_keyword_dedups_by_url(self):
        self.assertEqual(len(self.graph.index["SERVICE"]), 2)
        self.assertEqual([p.url for p in items_for_keyword(self.graph, "SERVICE")], ["/e"])

    def test_unknown_keyword_is_empty(self):
        self.assertEqual(items_for_keyword(self.graph, "NOPE"), [])
        self.assertEqual(items_for_link(self.graph, "NOPE", "MACHINE"), [])
        self.assertEqual(items_for_link(self.graph, "MACHINE", "NOPE"), [])

    def test_items_for_link_is_intersection_in_first_order(self):
        self.assertEqual([p.url for p in items_for_link(self.graph, "VIRTUAL", "MACHINE")], ["/a", "/d"])
        self.assertEqual([p.url for p in items_for_link(self.graph, "MACHINE", "VIRTUAL")], ["/a", "/d"])
        self.assertEqual([p.url for p in items_for_link(self.graph, "MACHINE", "STUDIO")], ["/c"])
        self.assertEqual(items_for_link(self.graph, "CONTAINER", "MACHINE"), [])

    def test_items_for_link_matches_keyword_intersection(self):
        for k1 in ("VIRTUAL", "MACHINE", "LEARNING", "SERVICE", "STORAGE"):
            for k2 in ("VIRTUAL", "MACHINE", "SCALE", "BUS", "STORAGE"):
                urls2 = {p.url for p in items_for_keyword(self.graph, k2)}
                expected = [p for p in items_for_keyword(self.graph, k1) if p.url in urls2]
                self.assertEqual(items_for_link(self.graph, k1, k2), expected)

    def test_self_link_selects_the_singleton_product(self):
        self.assertEqual([p.url for p in items_for_link(self.graph, "STORAGE", "STORAGE")], ["/x"])

    def test_empty_graph(self):
        g = build_graph([])
        self.assertEqual(items_for_keyword(g, "MACHINE"), [])
        self.assertEqual(items_for_link(g, "VIRTUAL", "MACHINE"), [])

    def test_neighbors(self):
        self.assertEqual(neighbors(self.graph, "MACHINE"), ["VIRTUAL", "LEARNING", "SCALE"])
        self.assertEqual(neighbors(self.graph, "STORAGE"), [])
        self.assertEqual(neighbors(self.graph, "SERVICE"), ["BUS"])

    def test_query_keyword(self):
        res = query_keyword(self.graph, "STUDIO")
        self.assertEqual(res["node"], {"id": "STUDIO", "size": 200})
        self.assertEqual(res["neighbors"], ["LEARNING"])
        self.assertEqual([p.url for p in res["products"]], ["/c"])

        missing = query_keyword(self.graph, "NOPE")
        self.assertIsNone(missing["node"])
        self.assertEqual(missing["products"], [])


if __name__ == "__main__":
    unittest.main()
