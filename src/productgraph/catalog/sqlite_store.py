from __future__ import annotations

import os
import sqlite3
import time
from pathlib import Path
from typing import Iterable

from .models import Product
from .parse import matches_filter


SCHEMA_VERSION = 1


def connect(db_path: str | os.PathLike[str]) -> sqlite3.Connection:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS meta (
          key TEXT PRIMARY KEY,
          value TEXT NOT NULL
        );
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS products (
          position INTEGER PRIMARY KEY,
          url TEXT NOT NULL UNIQUE,
          title TEXT NOT NULL
        );
        """
    )
    conn.execute(
        "INSERT OR REPLACE INTO meta(key, value) VALUES(?, ?)",
        ("schema_version", str(SCHEMA_VERSION)),
    )
    conn.commit()


def replace_products(
    conn: sqlite3.Connection,
    products: Iterable[Product],
    *,
    source: str,
    filter_text: str | None = None,
) -> int:
    """Replace the stored catalog snapshot. Returns the number of products stored.

    Products keep their input order; a repeated url keeps its first position.
    """
    conn.execute("DELETE FROM products;")
    conn.executemany(
        "INSERT OR IGNORE INTO products(position, url, title) VALUES(?, ?, ?)",
        [(i, p.url, p.title) for i, p in enumerate(products)],
    )

    meta = {
        "source": source,
        "filter_text": filter_text or "",
        "fetched_at": str(int(time.time())),
    }
    conn.executemany("INSERT OR REPLACE INTO meta(key, value) VALUES(?, ?)", list(meta.items()))
    conn.commit()
    return count_products(conn)


def count_products(conn: sqlite3.Connection) -> int:
    return int(conn.execute("SELECT COUNT(*) AS n FROM products").fetchone()["n"])


def list_products(conn: sqlite3.Connection, *, filter_text: str | None = None) -> list[Product]:
    rows = conn.execute("SELECT url, title FROM products ORDER BY position").fetchall()
    return [
        Product(url=str(r["url"]), title=str(r["title"]))
        for r in rows
        if matches_filter(str(r["title"]), filter_text)
    ]


def get_meta(conn: sqlite3.Connection) -> dict[str, str]:
    return {str(r["key"]): str(r["value"]) for r in conn.execute("SELECT key, value FROM meta")}
