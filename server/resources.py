from __future__ import annotations

from typing import Optional

from apps.api.dashboard import DashboardService
from apps.api.export import format_amount


SALES_SCHEMA_RESOURCE = """table: profiles
columns:
- id INTEGER PRIMARY KEY AUTOINCREMENT
- name TEXT UNIQUE NOT NULL
- color TEXT
- active INTEGER (1 active, 0 deactivated)

table: daily_sales
columns:
- id INTEGER PRIMARY KEY AUTOINCREMENT
- date TEXT NOT NULL (YYYY-MM-DD)
- profile_id INTEGER NOT NULL -> profiles.id
- amount TEXT NOT NULL (decimal)
- notes TEXT NULLABLE
- UNIQUE(date, profile_id)
"""


def get_sales_schema_resource() -> str:
    return SALES_SCHEMA_RESOURCE


def build_read_resource_context(
    service: DashboardService,
    start_date: Optional[str],
    end_date: Optional[str],
) -> str:
    totals = service.totals_by_profile(start_date, end_date)
    total = service.ledger.total_amount(start_date, end_date)

    if totals:
        ranking_text = "\n".join(
            f"- {item.profile.name} {format_amount(item.total)}" for item in totals
        )
    else:
        ranking_text = "- (none)"

    range_label = f"{start_date or '*'}..{end_date or '*'}"
    return (
        f"{get_sales_schema_resource()}\n"
        f"sales_by_profile(range={range_label}):\n{ranking_text}\n"
        f"sum(range={range_label}): {format_amount(total)}"
    )
