import unittest

from productgraph.catalog.fetch import CatalogError
from productgraph.catalog.models import Product
from productgraph.catalog.parse import filter_products
from productgraph.session import GraphSession, LoadStatus


CATALOG = [
    Product(url="/a", title="Virtual Machines"),
    Product(url="/b", title="Container Instances"),
    Product(url="/c", title="Machine Learning Studio"),
    Product(url="/x", title="Storage"),
]


class TestGraphSession(unittest.TestCase):
    def test_load_builds_graph_from_filtered_catalog(self):
        calls = []

        def loader(filter_text):
            calls.append(filter_text)
            return filter_products(CATALOG, filter_text)

        s = GraphSession(loader=loader, product_base_url="https://azure.microsoft.com")
        self.assertEqual(s.load(), LoadStatus.LOADED)
        self.assertEqual(len(s.nodes), 7)

        s.filter_text = "machine"
        self.assertEqual(s.load(), LoadStatus.LOADED)
        self.assertEqual(calls, ["", "machine"])
        self.assertEqual([n.id for n in s.nodes], ["VIRTUAL", "MACHINE", "LEARNING", "STUDIO"])
        self.assertFalse(s.in_progress)

    def test_select_node_and_link(self):
        s = GraphSession(loader=lambda f: list(CATALOG), product_base_url="https://azure.microsoft.com")
        s.load()

        self.assertEqual([p.url for p in s.select_node("MACHINE")], ["/a", "/c"])
        self.assertEqual([p.url for p in s.selected_products], ["/a", "/c"])

        self.assertEqual([p.url for p in s.select_link("MACHINE", "LEARNING")], ["/c"])
        self.assertEqual(s.select_link("VIRTUAL", "STORAGE"), [])
        self.assertEqual(s.selected_products, [])

        self.assertEqual(s.product_link(CATALOG[0]), "https://azure.microsoft.com/a")

    def test_failed_load_leaves_empty_graph(self):
        ok = {"value": True}

        def loader(filter_text):
            if not ok["value"]:
                raise CatalogError("backend down")
            return list(CATALOG)

        s = GraphSession(loader=loader)
        self.assertEqual(s.load(), LoadStatus.LOADED)
        s.select_node("MACHINE")

        ok["value"] = False
        self.assertEqual(s.load(), LoadStatus.FAILED)
        self.assertEqual(s.last_error, "backend down")
        self.assertEqual(s.nodes, ())
        self.assertEqual(s.links, ())
        self.assertEqual(s.selected_products, [])
        self.assertEqual(s.select_node("MACHINE"), [])
        self.assertFalse(s.in_progress)

    def test_reload_while_loading_is_ignored(self):
        holder = {}
        nested = []

        def loader(filter_text):
            self.assertTrue(holder["session"].in_progress)
            nested.append(holder["session"].load())
            return list(CATALOG)

        s = GraphSession(loader=loader)
        holder["session"] = s
        self.assertEqual(s.load(), LoadStatus.LOADED)
        self.assertEqual(nested, [LoadStatus.BUSY])
        self.assertEqual(len(s.nodes), 7)

    def test_rejected_reload_keeps_the_running_filter(self):
        holder = {}
        seen = []

        def loader(filter_text):
            seen.append(filter_text)
            if len(seen) == 1:
                self.assertEqual(holder["session"].load(filter_text="storage"), LoadStatus.BUSY)
                self.assertEqual(holder["session"].filter_text, "machine")
            return filter_products(CATALOG, filter_text)

        s = GraphSession(loader=loader)
        holder["session"] = s
        self.assertEqual(s.load(filter_text="machine"), LoadStatus.LOADED)
        self.assertEqual(seen, ["machine"])
        self.assertEqual(s.filter_text, "machine")
        self.assertEqual([n.id for n in s.nodes], ["VIRTUAL", "MACHINE", "LEARNING", "STUDIO"])

    def test_new_load_replaces_previous_graph(self):
        catalogs = [list(CATALOG), [Product(url="/q", title="Queue Storage")]]
        s = GraphSession(loader=lambda f: catalogs.pop(0))
        s.load()
        self.assertIsNotNone(s.graph.node("VIRTUAL"))

        s.load()
        self.assertEqual([n.id for n in s.nodes], ["QUEUE", "STORAGE"])
        self.assertEqual(s.select_node("VIRTUAL"), [])


if __name__ == "__main__":
    unittest.main()
