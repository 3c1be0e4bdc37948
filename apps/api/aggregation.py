from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date as date_module
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from .db.models import MONTHLY_TARGET_KEY
from .errors import InvalidState
from .stores import LedgerStore, ProfileRegistry, ProfileTotal, SettingsStore

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_TARGET = Decimal("15000")


@dataclass(frozen=True)
class DashboardSnapshot:
    total_sales: Decimal
    sales_by_profile: List[ProfileTotal]
    monthly_target: Decimal
    current_month_sales: Decimal
    last_month_sales: Decimal
    target_progress_percent: Decimal


def month_bounds(day: date_module) -> Tuple[str, str]:
    last_day = calendar.monthrange(day.year, day.month)[1]
    return (
        day.replace(day=1).isoformat(),
        day.replace(day=last_day).isoformat(),
    )


def previous_month_bounds(day: date_module) -> Tuple[str, str]:
    if day.month == 1:
        previous = date_module(day.year - 1, 12, 1)
    else:
        previous = date_module(day.year, day.month - 1, 1)
    return month_bounds(previous)


def totals_by_profile(
    ledger: LedgerStore,
    profiles: ProfileRegistry,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[ProfileTotal]:
    """Rank active profiles by revenue in the range.

    Profiles without entries are kept with a zero total. Ties are broken
    by name so the ranking is stable between calls.
    """
    active = profiles.list(active_only=True)
    totals = {profile.id: Decimal("0") for profile in active}
    for profile_id, amount in ledger.amounts(start_date, end_date):
        if profile_id in totals:
            totals[profile_id] += amount

    ranked = [ProfileTotal(profile=profile, total=totals[profile.id]) for profile in active]
    ranked.sort(key=lambda item: item.profile.name)
    ranked.sort(key=lambda item: item.total, reverse=True)
    return ranked


def resolve_monthly_target(
    settings: SettingsStore,
    default: Decimal = DEFAULT_MONTHLY_TARGET,
) -> Decimal:
    raw = settings.get(MONTHLY_TARGET_KEY)
    if raw is None:
        return default
    try:
        target = Decimal(raw)
    except (InvalidOperation, ValueError):
        raise InvalidState(f"Stored monthly target is not a number: {raw!r}")
    if not target.is_finite():
        raise InvalidState(f"Stored monthly target is not finite: {raw!r}")
    return target


def target_progress(current_month_sales: Decimal, monthly_target: Decimal) -> Decimal:
    if monthly_target <= 0:
        raise InvalidState("Monthly target must be positive to compute progress")
    return current_month_sales / monthly_target * 100


def dashboard_snapshot(
    ledger: LedgerStore,
    profiles: ProfileRegistry,
    settings: SettingsStore,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    now: Optional[date_module] = None,
    default_target: Decimal = DEFAULT_MONTHLY_TARGET,
) -> DashboardSnapshot:
    today = now or date_module.today()
    current_start, current_end = month_bounds(today)
    last_start, last_end = previous_month_bounds(today)

    monthly_target = resolve_monthly_target(settings, default_target)
    current_month_sales = ledger.total_amount(current_start, current_end)
    progress = target_progress(current_month_sales, monthly_target)

    snapshot = DashboardSnapshot(
        total_sales=ledger.total_amount(start_date, end_date),
        sales_by_profile=totals_by_profile(ledger, profiles, start_date, end_date),
        monthly_target=monthly_target,
        current_month_sales=current_month_sales,
        last_month_sales=ledger.total_amount(last_start, last_end),
        target_progress_percent=progress,
    )
    logger.info(
        "aggregation.dashboard start=%s end=%s total=%s progress=%s",
        start_date,
        end_date,
        snapshot.total_sales,
        progress,
    )
    return snapshot
