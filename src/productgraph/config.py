from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _optional_env(name: str, default: str) -> str | None:
    # Set-but-empty means "off".
    return os.getenv(name, default).strip() or None


@dataclass(frozen=True)
class Settings:
    # Backend that serves the raw product listing HTML.
    backend_base_url: str = os.getenv("PRODUCTGRAPH_BACKEND_BASE_URL", "http://localhost:7071/api")
    catalog_path: str = os.getenv("PRODUCTGRAPH_CATALOG_PATH", "/services-html")

    # Product links in the listing are site-relative.
    product_base_url: str = os.getenv("PRODUCTGRAPH_PRODUCT_BASE_URL", "https://azure.microsoft.com")

    # Snapshot cache used by the CLI.
    db_path: str = os.getenv("PRODUCTGRAPH_DB_PATH", "./data/catalog.db")

    http_timeout: float = float(os.getenv("PRODUCTGRAPH_HTTP_TIMEOUT", "30"))

    # Graph sizing
    node_weight: int = int(os.getenv("PRODUCTGRAPH_NODE_WEIGHT", "200"))
    # Empty disables the singleton marker.
    singleton_color: str | None = _optional_env("PRODUCTGRAPH_SINGLETON_COLOR", "lightgrey")

    log_level: str = os.getenv("PRODUCTGRAPH_LOG_LEVEL", "WARNING")

    @property
    def catalog_url(self) -> str:
        return self.backend_base_url.rstrip("/") + "/" + self.catalog_path.lstrip("/")
