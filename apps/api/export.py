from __future__ import annotations

import csv
import io
from decimal import Decimal
from typing import Iterable

from .stores import LedgerEntry
from .validation import round_cents

CSV_HEADER = ("Date", "Profile", "Amount", "Notes")
UTF8_BOM = "\ufeff"


def format_amount(amount: Decimal) -> str:
    return str(round_cents(amount))


def entries_to_csv(entries: Iterable[LedgerEntry]) -> str:
    """Render entries for spreadsheet tools: BOM, header, every field quoted."""
    buffer = io.StringIO()
    buffer.write(UTF8_BOM)
    buffer.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for entry in entries:
        writer.writerow(
            (
                entry.date,
                entry.profile_name or "",
                format_amount(entry.amount),
                entry.notes or "",
            )
        )
    return buffer.getvalue()


def export_filename(start_date: str, end_date: str) -> str:
    return f"sales_{start_date}_{end_date}.csv"
