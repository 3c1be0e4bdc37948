from __future__ import annotations

import logging
import os
from decimal import Decimal
from typing import Any, Optional

from apps.api.config import AppConfig
from apps.api.dashboard import DashboardService
from apps.api.db.session import SalesDatabase
from server.mcp import create_fastmcp_server


def build_mcp(config: Optional[AppConfig] = None) -> Any:
    config = config or AppConfig.from_env()
    database = SalesDatabase(config.db_path)
    database.init_db()
    service = DashboardService(database, default_target=Decimal(config.default_monthly_target))
    return create_fastmcp_server(service)


def run() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    mcp = build_mcp()
    host = os.getenv("MCP_SERVER_HOST", "127.0.0.1")
    port = int(os.getenv("MCP_SERVER_PORT", "8100"))
    path = os.getenv("MCP_SERVER_PATH", "/mcp")
    logging.getLogger(__name__).info(
        "server.start host=%s port=%s path=%s",
        host,
        port,
        path,
    )

    mcp.run(transport="streamable-http", host=host, port=port, path=path)


if __name__ == "__main__":
    run()
