from __future__ import annotations

import logging
from typing import Optional

from ..db.session import SalesDatabase

logger = logging.getLogger(__name__)


class SettingsStore:
    def __init__(self, database: SalesDatabase) -> None:
        self.database = database

    def get(self, key: str) -> Optional[str]:
        with self.database.transaction() as connection:
            row = connection.execute(
                "SELECT value FROM settings WHERE key = ?",
                (key,),
            ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self.database.transaction() as connection:
            connection.execute(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = datetime('now')
                """,
                (key, value),
            )
        logger.info("settings.set key=%s value=%s", key, value)
