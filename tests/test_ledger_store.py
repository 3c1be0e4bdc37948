from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from apps.api.db.session import SalesDatabase
from apps.api.errors import InvalidInput, NotFound
from apps.api.stores import LedgerStore, ProfileRegistry


def _new_stores(tmp_path):
    database = SalesDatabase(tmp_path / "sales.db")
    database.init_db()
    return LedgerStore(database), ProfileRegistry(database)


def test_upsert_twice_keeps_single_entry_with_second_amount(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A", "#111")

    first_id = ledger.upsert_entry("2024-01-01", a, "100.00")
    second_id = ledger.upsert_entry("2024-01-01", a, "40.00", "corrected")

    assert first_id == second_id
    entries = ledger.query_by_date("2024-01-01")
    assert len(entries) == 1
    assert entries[0].profile_name == "A"
    assert entries[0].amount == Decimal("40.00")
    assert entries[0].notes == "corrected"


def test_concurrent_first_writes_for_same_day_create_one_entry(tmp_path):
    database = SalesDatabase(tmp_path / "sales.db")
    database.init_db()
    a = ProfileRegistry(database).register("A")
    amounts = [f"{index}.00" for index in range(1, 9)]

    def write(amount):
        return LedgerStore(database).upsert_entry("2024-01-01", a, amount)

    with ThreadPoolExecutor(max_workers=len(amounts)) as pool:
        entry_ids = list(pool.map(write, amounts))

    assert len(set(entry_ids)) == 1
    entries = LedgerStore(database).query_by_date("2024-01-01")
    assert len(entries) == 1
    assert entries[0].id == entry_ids[0]
    assert str(entries[0].amount) in amounts


def test_upsert_accepts_amount_at_ceiling(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A")

    ledger.upsert_entry("2024-01-01", a, "1000000000000")

    assert ledger.total_amount() == Decimal("1000000000000")


def test_scenario_totals_over_two_days(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A", "#111")
    b = profiles.register("B", "#222")

    ledger.upsert_entry("2024-01-01", a, "100.00")
    ledger.upsert_entry("2024-01-01", b, "50.00")
    ledger.upsert_entry("2024-01-02", a, "25.00")

    assert ledger.total_amount("2024-01-01", "2024-01-02") == Decimal("175.00")
    assert ledger.total_amount("2024-01-02", "2024-01-02") == Decimal("25.00")


def test_total_amount_empty_range_is_zero(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A")
    ledger.upsert_entry("2024-01-01", a, 10)

    total = ledger.total_amount("2023-01-01", "2023-12-31")

    assert total is not None
    assert total == Decimal("0")


def test_total_amount_bounds_are_optional_and_independent(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A")
    ledger.upsert_entry("2024-01-01", a, 1)
    ledger.upsert_entry("2024-02-01", a, 2)
    ledger.upsert_entry("2024-03-01", a, 4)

    assert ledger.total_amount() == Decimal("7")
    assert ledger.total_amount(start_date="2024-02-01") == Decimal("6")
    assert ledger.total_amount(end_date="2024-02-01") == Decimal("3")


def test_total_amount_does_not_lose_decimal_precision(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A")
    b = profiles.register("B")
    ledger.upsert_entry("2024-01-01", a, 0.1)
    ledger.upsert_entry("2024-01-01", b, 0.2)

    assert ledger.total_amount() == Decimal("0.3")


@pytest.mark.parametrize(
    "amount", [-1, "-0.01", "abc", "", None, True, float("nan"), float("inf"), "1e30", "1000000000000.01"]
)
def test_upsert_rejects_invalid_amounts(tmp_path, amount):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A")

    with pytest.raises(InvalidInput):
        ledger.upsert_entry("2024-01-01", a, amount)

    assert ledger.query_by_date("2024-01-01") == []


@pytest.mark.parametrize("entry_date", ["2024-1-1", "20240101", "2024-02-30", "", None])
def test_upsert_rejects_invalid_dates(tmp_path, entry_date):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A")

    with pytest.raises(InvalidInput):
        ledger.upsert_entry(entry_date, a, 10)


def test_upsert_unknown_profile_fails_without_writing(tmp_path):
    ledger, _ = _new_stores(tmp_path)

    with pytest.raises(NotFound):
        ledger.upsert_entry("2024-01-01", 999, 10)

    assert ledger.total_amount() == Decimal("0")


def test_delete_entry_is_idempotent(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A")
    entry_id = ledger.upsert_entry("2024-01-01", a, 10)

    assert ledger.delete_entry(entry_id) is True
    assert ledger.get_entry(entry_id) is None
    assert ledger.delete_entry(entry_id) is False
    assert ledger.delete_entry(12345) is False


def test_query_range_orders_by_date_then_profile_name(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    zeta = profiles.register("Zeta")
    alpha = profiles.register("Alpha")

    ledger.upsert_entry("2024-01-02", zeta, 3)
    ledger.upsert_entry("2024-01-01", zeta, 2)
    ledger.upsert_entry("2024-01-02", alpha, 4)
    ledger.upsert_entry("2024-01-01", alpha, 1)
    ledger.upsert_entry("2024-01-03", alpha, 9)

    entries = ledger.query_range("2024-01-01", "2024-01-02")

    assert [(e.date, e.profile_name) for e in entries] == [
        ("2024-01-01", "Alpha"),
        ("2024-01-01", "Zeta"),
        ("2024-01-02", "Alpha"),
        ("2024-01-02", "Zeta"),
    ]

    only_zeta = ledger.query_range("2024-01-01", "2024-01-31", profile_id=zeta)
    assert [e.amount for e in only_zeta] == [Decimal("2"), Decimal("3")]


def test_query_range_keeps_entries_of_deactivated_profiles(tmp_path):
    ledger, profiles = _new_stores(tmp_path)
    a = profiles.register("A")
    ledger.upsert_entry("2024-01-01", a, 80)

    profiles.deactivate(a)

    entries = ledger.query_range("2024-01-01", "2024-01-31")
    assert len(entries) == 1
    assert entries[0].profile_id == a
    assert ledger.total_amount("2024-01-01", "2024-01-31") == Decimal("80")
