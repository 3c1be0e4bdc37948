from __future__ import annotations

from .fastmcp_app import create_fastmcp_server
from .handlers import SalesMCPServer
from .schemas import READ_TOOL_SCHEMAS

__all__ = ["SalesMCPServer", "READ_TOOL_SCHEMAS", "create_fastmcp_server"]
