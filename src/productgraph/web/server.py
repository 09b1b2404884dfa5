import logging
from typing import Any

from ..catalog.models import Product
from ..graph.model import Graph


logger = logging.getLogger(__name__)


def create_app(*, settings=None, session=None):
    # Lazy import so the core CLI works without web deps.
    from fastapi import FastAPI
    from fastapi.responses import JSONResponse

    from ..catalog.fetch import CatalogClient
    from ..config import Settings
    from ..graph.build import graph_stats
    from ..graph.query import neighbors
    from ..session import GraphSession, LoadStatus

    settings = settings or Settings()

    if session is None:
        client = CatalogClient(
            base_url=settings.backend_base_url,
            path=settings.catalog_path,
            timeout_s=settings.http_timeout,
        )
        session = GraphSession(
            loader=lambda filter_text: client.fetch_products(filter_text=filter_text),
            unit_weight=settings.node_weight,
            singleton_color=settings.singleton_color,
            product_base_url=settings.product_base_url,
        )

    app = FastAPI(title="Product Graph", version="0.1.0")
    app.state.session = session

    def _product_dicts(products: list[Product]) -> list[dict[str, Any]]:
        return [{**p.to_dict(), "href": session.product_link(p)} for p in products]

    def _graph_payload(graph: Graph) -> dict[str, Any]:
        return {**graph.to_dict(), "stats": graph_stats(graph)}

    @app.get("/api/health")
    def health(base_url: str | None = None):
        import httpx

        url = (base_url or settings.catalog_url).rstrip("/")
        out: dict[str, Any] = {"catalog_url": url, "catalog_ok": False}
        try:
            r = httpx.get(url, timeout=5.0)
            r.raise_for_status()
            out["catalog_ok"] = True
        except Exception as e:
            out["error"] = str(e)
        return out

    @app.post("/api/reload")
    def reload(payload: dict[str, Any] | None = None):
        payload = payload or {}
        status = session.load(filter_text=str(payload.get("filter_text") or ""))
        if status is LoadStatus.BUSY:
            return JSONResponse({"ok": False, "error": "A reload is already in progress"}, status_code=409)
        if status is LoadStatus.FAILED:
            return JSONResponse({"ok": False, "error": session.last_error}, status_code=502)

        return {"ok": True, "filter_text": session.filter_text, "stats": graph_stats(session.graph)}

    @app.get("/api/graph")
    def graph():
        return {"ok": True, "in_progress": session.in_progress, **_graph_payload(session.graph)}

    @app.get("/api/graph/node")
    def graph_node(keyword: str):
        products = session.select_node(keyword)
        return {
            "ok": True,
            "keyword": keyword,
            "neighbors": neighbors(session.graph, keyword),
            "products": _product_dicts(products),
        }

    @app.get("/api/graph/link")
    def graph_link(source: str, target: str):
        products = session.select_link(source, target)
        return {"ok": True, "source": source, "target": target, "products": _product_dicts(products)}

    return app
