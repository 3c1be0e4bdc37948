from __future__ import annotations

import logging
import random
import sqlite3
from typing import List, Optional

from ..db.session import SalesDatabase
from ..errors import Conflict, NotFound
from ..validation import parse_name
from .records import Profile

logger = logging.getLogger(__name__)


def random_color() -> str:
    return "#{:06x}".format(random.randint(0, 0xFFFFFF))


class ProfileRegistry:
    def __init__(self, database: SalesDatabase) -> None:
        self.database = database

    def register(self, name: str, color: Optional[str] = None) -> int:
        name = parse_name(name)
        color = color or random_color()
        try:
            with self.database.transaction() as connection:
                cursor = connection.execute(
                    "INSERT INTO profiles (name, color) VALUES (?, ?)",
                    (name, color),
                )
        except sqlite3.IntegrityError as exc:
            raise Conflict(f"A profile named {name!r} already exists") from exc
        profile_id = cursor.lastrowid
        if profile_id is None:
            raise RuntimeError("Failed to insert profile")
        logger.info("profiles.register id=%s name=%s color=%s", profile_id, name, color)
        return profile_id

    def rename(self, profile_id: int, name: str, color: Optional[str] = None) -> None:
        name = parse_name(name)
        current = self.get(profile_id)
        if current is None:
            raise NotFound(f"Profile {profile_id} not found")
        try:
            with self.database.transaction() as connection:
                connection.execute(
                    "UPDATE profiles SET name = ?, color = ? WHERE id = ?",
                    (name, color or current.color, profile_id),
                )
        except sqlite3.IntegrityError as exc:
            raise Conflict(f"A profile named {name!r} already exists") from exc
        logger.info("profiles.rename id=%s name=%s", profile_id, name)

    def deactivate(self, profile_id: int) -> None:
        with self.database.transaction() as connection:
            cursor = connection.execute(
                "UPDATE profiles SET active = 0 WHERE id = ?",
                (profile_id,),
            )
        if cursor.rowcount == 0:
            raise NotFound(f"Profile {profile_id} not found")
        logger.info("profiles.deactivate id=%s", profile_id)

    def get(self, profile_id: int) -> Optional[Profile]:
        with self.database.transaction() as connection:
            row = connection.execute(
                "SELECT * FROM profiles WHERE id = ?",
                (profile_id,),
            ).fetchone()
        return Profile.from_row(row) if row else None

    def list(self, active_only: bool = False) -> List[Profile]:
        query = "SELECT * FROM profiles"
        if active_only:
            query += " WHERE active = 1"
        query += " ORDER BY name"
        with self.database.transaction() as connection:
            rows = connection.execute(query).fetchall()
        return [Profile.from_row(row) for row in rows]
