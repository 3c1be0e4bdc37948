from __future__ import annotations

from shared.sales_contracts import read_tool_input_schema


def _function_schema(name: str, description: str) -> dict:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": read_tool_input_schema(name),
        },
    }


READ_TOOL_SCHEMAS = [
    _function_schema(
        "list_sales",
        "List daily sales between two dates (inclusive), optionally for one profile.",
    ),
    _function_schema(
        "sales_for_date",
        "List every profile's sale for a single date.",
    ),
    _function_schema(
        "sum_sales",
        "Return total revenue for an optional date range.",
    ),
    _function_schema(
        "sales_by_profile",
        "Rank active profiles by revenue for an optional date range.",
    ),
    _function_schema(
        "dashboard_stats",
        "Return totals, month-over-month figures and monthly target progress.",
    ),
    _function_schema(
        "list_profiles",
        "List storefront profiles ordered by name.",
    ),
]
