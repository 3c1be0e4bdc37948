from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


class _BaseArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ListSalesArgs(_BaseArgs):
    start_date: str
    end_date: str
    profile_id: Optional[int] = None


class SalesForDateArgs(_BaseArgs):
    entry_date: str


class SumSalesArgs(_BaseArgs):
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class SalesByProfileArgs(_BaseArgs):
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class DashboardStatsArgs(_BaseArgs):
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class ListProfilesArgs(_BaseArgs):
    active_only: bool = True


class SaveSaleArgs(_BaseArgs):
    entry_date: str
    profile_id: int
    amount: Union[Decimal, str]
    notes: Optional[str] = None


class ReadResourceContextArgs(_BaseArgs):
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class DeleteSaleArgs(_BaseArgs):
    entry_id: int


class SaleRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    date: str
    profile_id: int
    profile_name: Optional[str] = None
    amount: float
    notes: Optional[str] = None


class ProfileTotalRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    color: Optional[str] = None
    total: float


READ_TOOLS = (
    "list_sales",
    "sales_for_date",
    "sum_sales",
    "sales_by_profile",
    "dashboard_stats",
    "list_profiles",
)

_ARG_MODEL_BY_TOOL: dict[str, type[_BaseArgs]] = {
    "list_sales": ListSalesArgs,
    "sales_for_date": SalesForDateArgs,
    "sum_sales": SumSalesArgs,
    "sales_by_profile": SalesByProfileArgs,
    "dashboard_stats": DashboardStatsArgs,
    "list_profiles": ListProfilesArgs,
    "save_sale": SaveSaleArgs,
    "delete_sale": DeleteSaleArgs,
    "get_read_resource_context": ReadResourceContextArgs,
}


def coerce_arguments(arguments: Any) -> dict:
    if arguments is None:
        return {}
    if isinstance(arguments, dict):
        return arguments
    if isinstance(arguments, str):
        try:
            parsed = json.loads(arguments)
            return parsed if isinstance(parsed, dict) else {}
        except json.JSONDecodeError:
            return {}
    return {}


def tool_arguments_for_call(tool_name: str, arguments: Any) -> dict:
    model_cls = _ARG_MODEL_BY_TOOL.get(tool_name)
    coerced = coerce_arguments(arguments)
    if model_cls is None:
        return coerced
    validated = model_cls.model_validate(coerced)
    return validated.model_dump(exclude_none=True)


def read_tool_input_schema(tool_name: str) -> dict:
    if tool_name not in READ_TOOLS:
        raise ValueError(f"Unsupported read tool: {tool_name}")
    return _ARG_MODEL_BY_TOOL[tool_name].model_json_schema()


def normalize_tool_result(tool_name: str, value: Any) -> Any:
    if tool_name in {"list_sales", "sales_for_date"}:
        if not isinstance(value, list):
            raise ValueError(f"{tool_name} result must be a list")
        return [SaleRecord.model_validate(row).model_dump() for row in value]
    if tool_name == "sales_by_profile":
        if not isinstance(value, list):
            raise ValueError("sales_by_profile result must be a list")
        return [ProfileTotalRecord.model_validate(row).model_dump() for row in value]
    if tool_name == "sum_sales":
        return float(value)
    if tool_name == "save_sale":
        return int(value)
    if tool_name == "delete_sale":
        return bool(value)
    if tool_name == "get_read_resource_context":
        return value if isinstance(value, str) else str(value)
    return value
