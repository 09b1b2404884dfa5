from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .catalog import sqlite_store
from .catalog.fetch import CatalogClient, CatalogError
from .catalog.models import Product, product_url
from .catalog.parse import parse_products
from .config import Settings
from .graph.build import build_graph, graph_stats
from .graph.extract import DEFAULT_NORMALIZER, KeywordNormalizer
from .graph.model import Graph
from .graph.query import items_for_link, query_keyword


app = typer.Typer(add_completion=False, help="Product graph: keyword co-occurrence graph over a product catalog.")
console = Console()

catalog_app = typer.Typer(add_completion=False, help="Fetch and inspect the product catalog snapshot.")
graph_app = typer.Typer(add_completion=False, help="Build and query the keyword graph.")
app.add_typer(catalog_app, name="catalog")
app.add_typer(graph_app, name="graph")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
):
    settings = Settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@catalog_app.command("fetch")
def catalog_fetch(
    db: Path = typer.Option(Path(Settings().db_path), "--db", help="SQLite snapshot path to create/replace"),
    filter_text: str = typer.Option("", "--filter", help="Keep only titles containing this text (case-insensitive)"),
    html: Path | None = typer.Option(None, "--html", exists=True, file_okay=True, dir_okay=False, help="Read a saved listing page instead of fetching"),
    base_url: str | None = typer.Option(None, "--base-url", help="Catalog backend base URL"),
):
    """Fetch the product listing, scrape products and store a snapshot."""
    settings = Settings()

    if html is not None:
        products = parse_products(html.read_text(encoding="utf-8", errors="replace"), filter_text=filter_text)
        source = str(html)
    else:
        client = _catalog_client(settings, base_url)
        try:
            products = client.fetch_products(filter_text=filter_text)
        except CatalogError as e:
            console.print(str(e), style="red")
            raise typer.Exit(code=2)
        source = client.url

    conn = sqlite_store.connect(db)
    try:
        sqlite_store.init_db(conn)
        n = sqlite_store.replace_products(conn, products, source=source, filter_text=filter_text)
    finally:
        conn.close()

    console.print(f"Products stored: {n}")
    console.print("Next: run `productgraph graph build --db ...` to see the graph.")


@catalog_app.command("list")
def catalog_list(
    db: Path = typer.Option(Path(Settings().db_path), "--db", exists=True, file_okay=True, dir_okay=False),
    filter_text: str = typer.Option("", "--filter", help="Keep only titles containing this text"),
):
    """List the stored products."""
    products = _load_products(db, filter_text)
    console.print(_products_table(products, title=f"{len(products)} Products"))


@graph_app.command("build")
def graph_build(
    db: Path = typer.Option(Path(Settings().db_path), "--db", exists=True, file_okay=True, dir_okay=False),
    filter_text: str = typer.Option("", "--filter", help="Keep only titles containing this text"),
    stop_word: list[str] = typer.Option([], "--stop-word", help="Extra word to ignore (repeatable)"),
    top: int = typer.Option(15, help="How many of the heaviest keywords to show"),
):
    """Build the keyword graph from the stored snapshot and print a summary."""
    graph = _build(db, filter_text, stop_word)

    table = Table(title="Graph Stats")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for k, v in graph_stats(graph).items():
        table.add_row(k, str(v))
    console.print(table)

    if graph.nodes and top > 0:
        t2 = Table(title=f"Top {top} Keywords")
        t2.add_column("keyword")
        t2.add_column("weight", justify="right")
        for n in sorted(graph.nodes, key=lambda n: n.weight, reverse=True)[:top]:
            t2.add_row(Text(n.id), str(n.weight))
        console.print(t2)


@graph_app.command("export")
def graph_export(
    db: Path = typer.Option(Path(Settings().db_path), "--db", exists=True, file_okay=True, dir_okay=False),
    out: Path = typer.Option(..., "--out", help="Output JSON path"),
    filter_text: str = typer.Option("", "--filter", help="Keep only titles containing this text"),
    stop_word: list[str] = typer.Option([], "--stop-word", help="Extra word to ignore (repeatable)"),
):
    """Write {nodes, links} JSON for a graph renderer."""
    graph = _build(db, filter_text, stop_word)

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(graph.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    console.print(f"Wrote {len(graph.nodes)} nodes and {len(graph.links)} links to {out}")


@graph_app.command("node")
def graph_node(
    keyword: str = typer.Argument(..., help="Keyword, e.g. 'machines' or 'MACHINE'"),
    db: Path = typer.Option(Path(Settings().db_path), "--db", exists=True, file_okay=True, dir_okay=False),
    filter_text: str = typer.Option("", "--filter", help="Keep only titles containing this text"),
):
    """Show a keyword: its weight, linked keywords and the products behind it."""
    graph = _build(db, filter_text, [])
    kw = DEFAULT_NORMALIZER.canonical(keyword)

    res = query_keyword(graph, kw)
    if res["node"] is None:
        console.print(f"No such keyword: {kw}", style="yellow")
        raise typer.Exit(code=2)

    console.print(f"{kw} (weight={res['node']['size']})", markup=False, style="bold")
    if res["neighbors"]:
        console.print("linked to: " + ", ".join(res["neighbors"]), markup=False)
    console.print(_products_table(res["products"], title="Products"))


@graph_app.command("link")
def graph_link(
    keyword1: str = typer.Argument(...),
    keyword2: str = typer.Argument(...),
    db: Path = typer.Option(Path(Settings().db_path), "--db", exists=True, file_okay=True, dir_okay=False),
    filter_text: str = typer.Option("", "--filter", help="Keep only titles containing this text"),
):
    """Show the products whose titles contain both keywords."""
    graph = _build(db, filter_text, [])
    kw1 = DEFAULT_NORMALIZER.canonical(keyword1)
    kw2 = DEFAULT_NORMALIZER.canonical(keyword2)

    products = items_for_link(graph, kw1, kw2)
    if not products:
        console.print(f"No products for {kw1} + {kw2}", style="yellow")
        raise typer.Exit(code=2)
    console.print(_products_table(products, title=f"{kw1} + {kw2}"))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes (dev only)"),
):
    """Run the graph JSON API (FastAPI)."""
    try:
        import uvicorn
    except ImportError:
        console.print("Missing web dependencies. Install: `pip install -e '.[web]'`", style="red")
        raise typer.Exit(code=2)

    if reload:
        uvicorn.run("productgraph.web.server:create_app", factory=True, host=host, port=int(port), reload=True)
        return

    from .web.server import create_app

    uvicorn.run(create_app(), host=host, port=int(port))


def _catalog_client(settings: Settings, base_url: str | None) -> CatalogClient:
    return CatalogClient(
        base_url=(base_url or settings.backend_base_url),
        path=settings.catalog_path,
        timeout_s=settings.http_timeout,
    )


def _load_products(db: Path, filter_text: str) -> list[Product]:
    conn = sqlite_store.connect(db)
    try:
        sqlite_store.init_db(conn)
        products = sqlite_store.list_products(conn, filter_text=filter_text)
    finally:
        conn.close()

    if not products:
        console.print("No products stored. Run `productgraph catalog fetch` first.", style="yellow")
    return products


def _build(db: Path, filter_text: str, stop_words: list[str]) -> Graph:
    settings = Settings()
    normalizer: KeywordNormalizer = DEFAULT_NORMALIZER
    if stop_words:
        normalizer = normalizer.extend(stop_words=stop_words)
    return build_graph(
        _load_products(db, filter_text),
        normalizer=normalizer,
        unit_weight=settings.node_weight,
        singleton_color=settings.singleton_color,
    )


def _products_table(products: list[Product], *, title: str) -> Table:
    base_url = Settings().product_base_url
    table = Table(title=title)
    table.add_column("#", justify="right", width=4)
    table.add_column("title", no_wrap=True)
    table.add_column("link", overflow="fold")
    for i, p in enumerate(products, start=1):
        table.add_row(Text(str(i)), Text(p.title), Text(product_url(base_url, p)))
    return table


if __name__ == "__main__":
    app()
