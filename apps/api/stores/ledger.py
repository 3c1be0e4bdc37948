from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from ..db.session import SalesDatabase
from ..errors import NotFound
from ..validation import parse_amount, parse_date
from .records import LedgerEntry

logger = logging.getLogger(__name__)

_ENTRY_SELECT = """
SELECT ds.*, p.name AS profile_name, p.color AS profile_color
FROM daily_sales ds
JOIN profiles p ON ds.profile_id = p.id
"""


class LedgerStore:
    def __init__(self, database: SalesDatabase) -> None:
        self.database = database

    def upsert_entry(
        self,
        entry_date: str,
        profile_id: int,
        amount: Any,
        notes: Optional[str] = None,
    ) -> int:
        entry_date = parse_date(entry_date)
        value = parse_amount(amount)
        with self.database.transaction() as connection:
            exists = connection.execute(
                "SELECT 1 FROM profiles WHERE id = ?",
                (profile_id,),
            ).fetchone()
            if exists is None:
                raise NotFound(f"Profile {profile_id} not found")
            row = connection.execute(
                """
                INSERT INTO daily_sales (date, profile_id, amount, notes)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(date, profile_id) DO UPDATE SET
                    amount = excluded.amount,
                    notes = excluded.notes,
                    updated_at = datetime('now')
                RETURNING id
                """,
                (entry_date, profile_id, str(value), notes),
            ).fetchone()
        entry_id = int(row["id"])
        logger.info(
            "ledger.upsert date=%s profile_id=%s amount=%s entry_id=%s",
            entry_date,
            profile_id,
            value,
            entry_id,
        )
        return entry_id

    def delete_entry(self, entry_id: int) -> bool:
        with self.database.transaction() as connection:
            cursor = connection.execute(
                "DELETE FROM daily_sales WHERE id = ?",
                (entry_id,),
            )
        deleted = cursor.rowcount > 0
        logger.info("ledger.delete entry_id=%s deleted=%s", entry_id, deleted)
        return deleted

    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        with self.database.transaction() as connection:
            row = connection.execute(
                _ENTRY_SELECT + "WHERE ds.id = ?",
                (entry_id,),
            ).fetchone()
        return LedgerEntry.from_row(row) if row else None

    def query_range(
        self,
        start_date: str,
        end_date: str,
        profile_id: Optional[int] = None,
    ) -> List[LedgerEntry]:
        start_date = parse_date(start_date, "start_date")
        end_date = parse_date(end_date, "end_date")
        query = _ENTRY_SELECT + "WHERE ds.date BETWEEN ? AND ?"
        params: list = [start_date, end_date]
        if profile_id is not None:
            query += " AND ds.profile_id = ?"
            params.append(profile_id)
        query += " ORDER BY ds.date, p.name"
        with self.database.transaction() as connection:
            rows = connection.execute(query, params).fetchall()
        return [LedgerEntry.from_row(row) for row in rows]

    def query_by_date(self, entry_date: str) -> List[LedgerEntry]:
        entry_date = parse_date(entry_date)
        with self.database.transaction() as connection:
            rows = connection.execute(
                _ENTRY_SELECT + "WHERE ds.date = ? ORDER BY p.name",
                (entry_date,),
            ).fetchall()
        return [LedgerEntry.from_row(row) for row in rows]

    def amounts(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Tuple[int, Decimal]]:
        """Return ``(profile_id, amount)`` pairs, each bound optional and inclusive."""
        query = "SELECT profile_id, amount FROM daily_sales WHERE 1=1"
        params: list = []
        if start_date:
            query += " AND date >= ?"
            params.append(parse_date(start_date, "start_date"))
        if end_date:
            query += " AND date <= ?"
            params.append(parse_date(end_date, "end_date"))
        with self.database.transaction() as connection:
            rows = connection.execute(query, params).fetchall()
        return [(row["profile_id"], Decimal(str(row["amount"]))) for row in rows]

    def total_amount(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Decimal:
        return sum((amount for _, amount in self.amounts(start_date, end_date)), Decimal("0"))
