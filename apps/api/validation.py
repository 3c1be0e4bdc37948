from __future__ import annotations

import re
from datetime import date as date_module
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any

from .errors import InvalidInput

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Upper bound for a single amount or target. Keeps sums and their two-decimal
# rendering well inside the default decimal context.
MAX_AMOUNT = Decimal("1000000000000")
CENTS = Decimal("0.01")


def parse_date(value: Any, field: str = "date") -> str:
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise InvalidInput(f"{field} must be a date string (YYYY-MM-DD)")
    try:
        date_module.fromisoformat(value)
    except ValueError:
        raise InvalidInput(f"{field} must be a valid calendar date")
    return value


def parse_amount(value: Any, field: str = "amount") -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidInput(f"{field} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"{field} must be a number")
    if not amount.is_finite():
        raise InvalidInput(f"{field} must be finite")
    if amount < 0:
        raise InvalidInput(f"{field} must be >= 0")
    if amount > MAX_AMOUNT:
        raise InvalidInput(f"{field} must be <= {MAX_AMOUNT}")
    return amount


def round_cents(value: Decimal) -> Decimal:
    """Round to two decimals without running into the context precision limit."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(CENTS)


def parse_name(value: Any, field: str = "name") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{field} is required")
    return value.strip()
