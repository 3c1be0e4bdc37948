from __future__ import annotations

from typing import Any, Optional, Union

from fastmcp import FastMCP

from apps.api.dashboard import DashboardService
from server.resources import get_sales_schema_resource

from .handlers import SalesMCPServer


def create_fastmcp_server(service: DashboardService) -> Any:
    server = SalesMCPServer(service)
    mcp = FastMCP("sales-mcp-server")

    @mcp.tool(name="list_sales")
    def list_sales(start_date: str, end_date: str, profile_id: Optional[int] = None) -> list[dict]:
        return server.execute(
            "list_sales",
            {"start_date": start_date, "end_date": end_date, "profile_id": profile_id},
        )

    @mcp.tool(name="sales_for_date")
    def sales_for_date(entry_date: str) -> list[dict]:
        return server.execute("sales_for_date", {"entry_date": entry_date})

    @mcp.tool(name="sum_sales")
    def sum_sales(start_date: Optional[str] = None, end_date: Optional[str] = None) -> float:
        return server.execute("sum_sales", {"start_date": start_date, "end_date": end_date})

    @mcp.tool(name="sales_by_profile")
    def sales_by_profile(start_date: Optional[str] = None, end_date: Optional[str] = None) -> list[dict]:
        return server.execute("sales_by_profile", {"start_date": start_date, "end_date": end_date})

    @mcp.tool(name="dashboard_stats")
    def dashboard_stats(start_date: Optional[str] = None, end_date: Optional[str] = None) -> dict:
        return server.execute("dashboard_stats", {"start_date": start_date, "end_date": end_date})

    @mcp.tool(name="list_profiles")
    def list_profiles(active_only: bool = True) -> list[dict]:
        return server.execute("list_profiles", {"active_only": active_only})

    @mcp.tool(name="save_sale")
    def save_sale(
        entry_date: str,
        profile_id: int,
        amount: Union[float, str],
        notes: Optional[str] = None,
    ) -> int:
        return server.execute(
            "save_sale",
            {"entry_date": entry_date, "profile_id": profile_id, "amount": amount, "notes": notes},
        )

    @mcp.tool(name="delete_sale")
    def delete_sale(entry_id: int) -> bool:
        return server.execute("delete_sale", {"entry_id": entry_id})

    @mcp.tool(name="get_read_resource_context")
    def get_read_resource_context(start_date: Optional[str] = None, end_date: Optional[str] = None) -> str:
        return server.execute(
            "get_read_resource_context",
            {"start_date": start_date, "end_date": end_date},
        )

    @mcp.resource("sales://schema")
    def sales_schema_resource() -> str:
        return get_sales_schema_resource()

    @mcp.prompt(name="read_tool_system_prompt")
    def read_tool_system_prompt(resource_context: str) -> str:
        context = resource_context.strip() or "(none)"
        return (
            "You are a read-only sales dashboard assistant. "
            "Use exactly one available read tool for each query. "
            "Never call save or delete tools.\n\n"
            f"Context resources:\n{context}"
        )

    return mcp
