from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Profile:
    id: int
    name: str
    color: Optional[str]
    active: bool
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Profile":
        return cls(
            id=row["id"],
            name=row["name"],
            color=row["color"],
            active=bool(row["active"]),
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "active": self.active,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class LedgerEntry:
    id: int
    date: str
    profile_id: int
    amount: Decimal
    notes: Optional[str] = None
    profile_name: Optional[str] = None
    profile_color: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "LedgerEntry":
        keys = row.keys()
        return cls(
            id=row["id"],
            date=row["date"],
            profile_id=row["profile_id"],
            amount=Decimal(str(row["amount"])),
            notes=row["notes"],
            profile_name=row["profile_name"] if "profile_name" in keys else None,
            profile_color=row["profile_color"] if "profile_color" in keys else None,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


@dataclass(frozen=True)
class ProfileTotal:
    profile: Profile
    total: Decimal
