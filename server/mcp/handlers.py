from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from apps.api.dashboard import DashboardService
from apps.api.schemas import DashboardStats, ProfileOut, ProfileTotalOut, SaleOut, money
from server.resources import build_read_resource_context
from shared.sales_contracts import normalize_tool_result, tool_arguments_for_call

from .schemas import READ_TOOL_SCHEMAS

logger = logging.getLogger(__name__)


class SalesMCPServer:
    def __init__(self, service: DashboardService) -> None:
        self.service = service
        self._handlers: dict[str, Callable[[dict], Any]] = {
            "list_sales": self._handle_list_sales,
            "sales_for_date": self._handle_sales_for_date,
            "sum_sales": self._handle_sum_sales,
            "sales_by_profile": self._handle_sales_by_profile,
            "dashboard_stats": self._handle_dashboard_stats,
            "list_profiles": self._handle_list_profiles,
            "save_sale": self._handle_save_sale,
            "delete_sale": self._handle_delete_sale,
            "get_read_resource_context": self._handle_get_read_resource_context,
        }

    def get_read_tool_schemas(self) -> list[dict]:
        return READ_TOOL_SCHEMAS

    def _handle_list_sales(self, args: dict) -> list[dict]:
        entries = self.service.sales_in_range(
            args["start_date"],
            args["end_date"],
            args.get("profile_id"),
        )
        return [SaleOut.from_entry(entry).model_dump() for entry in entries]

    def _handle_sales_for_date(self, args: dict) -> list[dict]:
        entries = self.service.sales_for_date(args["entry_date"])
        return [SaleOut.from_entry(entry).model_dump() for entry in entries]

    def _handle_sum_sales(self, args: dict) -> float:
        total = self.service.ledger.total_amount(args.get("start_date"), args.get("end_date"))
        return money(total)

    def _handle_sales_by_profile(self, args: dict) -> list[dict]:
        totals = self.service.totals_by_profile(args.get("start_date"), args.get("end_date"))
        return [ProfileTotalOut.from_total(item).model_dump() for item in totals]

    def _handle_dashboard_stats(self, args: dict) -> dict:
        snapshot = self.service.dashboard(args.get("start_date"), args.get("end_date"))
        return DashboardStats.from_snapshot(snapshot).model_dump(by_alias=True)

    def _handle_list_profiles(self, args: dict) -> list[dict]:
        profiles = self.service.profiles.list(active_only=args.get("active_only", True))
        return [ProfileOut.from_profile(profile).model_dump() for profile in profiles]

    def _handle_save_sale(self, args: dict) -> int:
        return self.service.ledger.upsert_entry(
            args["entry_date"],
            args["profile_id"],
            args["amount"],
            args.get("notes"),
        )

    def _handle_delete_sale(self, args: dict) -> bool:
        return self.service.delete_sale(args["entry_id"])

    def _handle_get_read_resource_context(self, args: dict) -> str:
        return build_read_resource_context(
            self.service,
            start_date=args.get("start_date"),
            end_date=args.get("end_date"),
        )

    def execute(self, name: str, arguments: Any) -> Any:
        handler: Optional[Callable[[dict], Any]] = self._handlers.get(name)
        if handler is None:
            logger.warning("mcp_server.execute.unsupported tool=%s", name)
            raise ValueError(f"Unsupported MCP tool: {name}")

        args = tool_arguments_for_call(name, arguments)
        logger.info("mcp_server.execute.start tool=%s args=%s", name, args)
        result = normalize_tool_result(name, handler(args))
        logger.info("mcp_server.execute.done tool=%s result_type=%s", name, type(result).__name__)
        return result
