from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date as date_module
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from . import aggregation
from .db.models import MONTHLY_TARGET_KEY
from .db.session import SalesDatabase
from .errors import InvalidInput
from .export import entries_to_csv
from .stores import LedgerEntry, LedgerStore, ProfileRegistry, ProfileTotal, SettingsStore
from .validation import parse_amount, parse_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleInput:
    profile_id: int
    amount: Decimal


def validate_sales(sales: Sequence[Any]) -> List[SaleInput]:
    """Turn raw ``{profile_id, amount}`` items into checked ``SaleInput`` values.

    A blank amount counts as zero, matching what the entry form submits for
    untouched fields.
    """
    validated: List[SaleInput] = []
    for index, item in enumerate(sales):
        if isinstance(item, SaleInput):
            validated.append(item)
            continue
        if not isinstance(item, dict):
            raise InvalidInput(f"sales[{index}] must be an object")
        profile_id = item.get("profile_id", item.get("profileId"))
        if isinstance(profile_id, bool) or not isinstance(profile_id, int) or profile_id <= 0:
            raise InvalidInput(f"sales[{index}].profile_id must be a positive integer")
        raw_amount = item.get("amount")
        if raw_amount is None or (isinstance(raw_amount, str) and not raw_amount.strip()):
            raw_amount = 0
        amount = parse_amount(raw_amount, f"sales[{index}].amount")
        validated.append(SaleInput(profile_id=profile_id, amount=amount))
    return validated


class DashboardService:
    def __init__(
        self,
        database: SalesDatabase,
        default_target: Decimal = aggregation.DEFAULT_MONTHLY_TARGET,
    ) -> None:
        self.database = database
        self.ledger = LedgerStore(database)
        self.profiles = ProfileRegistry(database)
        self.settings = SettingsStore(database)
        self.default_target = default_target

    def save_day(
        self,
        entry_date: str,
        sales: Sequence[Any],
        notes: Optional[str] = None,
    ) -> List[int]:
        """Record one amount per profile for a day.

        Everything is validated before the first write, but the writes
        themselves are independent: if one fails, the earlier ones stay
        committed.
        """
        entry_date = parse_date(entry_date)
        validated = validate_sales(sales)
        notes = notes or None
        logger.info("dashboard.save_day date=%s count=%d", entry_date, len(validated))
        return [
            self.ledger.upsert_entry(entry_date, sale.profile_id, sale.amount, notes)
            for sale in validated
        ]

    def sales_in_range(
        self,
        start_date: str,
        end_date: str,
        profile_id: Optional[int] = None,
    ) -> List[LedgerEntry]:
        return self.ledger.query_range(start_date, end_date, profile_id)

    def sales_for_date(self, entry_date: str) -> List[LedgerEntry]:
        return self.ledger.query_by_date(entry_date)

    def delete_sale(self, entry_id: int) -> bool:
        return self.ledger.delete_entry(entry_id)

    def totals_by_profile(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[ProfileTotal]:
        return aggregation.totals_by_profile(self.ledger, self.profiles, start_date, end_date)

    def dashboard(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        now: Optional[date_module] = None,
    ) -> aggregation.DashboardSnapshot:
        return aggregation.dashboard_snapshot(
            self.ledger,
            self.profiles,
            self.settings,
            start_date,
            end_date,
            now=now,
            default_target=self.default_target,
        )

    def monthly_target(self) -> Decimal:
        return aggregation.resolve_monthly_target(self.settings, self.default_target)

    def set_monthly_target(self, value: Any) -> Decimal:
        target = parse_amount(value, "target")
        if target <= 0:
            raise InvalidInput("target must be > 0")
        self.settings.set(MONTHLY_TARGET_KEY, str(target))
        return target

    def export_csv(
        self,
        start_date: str,
        end_date: str,
        profile_id: Optional[int] = None,
    ) -> str:
        entries = self.ledger.query_range(start_date, end_date, profile_id)
        logger.info(
            "dashboard.export_csv start=%s end=%s profile_id=%s rows=%d",
            start_date,
            end_date,
            profile_id,
            len(entries),
        )
        return entries_to_csv(entries)
