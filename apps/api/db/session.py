from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from .models import ALL_SCHEMAS, DEFAULT_PROFILES, MONTHLY_TARGET_KEY

ROOT_DIR = Path(__file__).resolve().parents[3]
DEFAULT_DB_PATH = ROOT_DIR / "data" / "sales.db"

logger = logging.getLogger(__name__)


class SalesDatabase:
    """Handle to the SQLite file shared by every store.

    Each operation opens its own connection, so the handle can be used
    from several request threads at once. SQLite serializes the writers.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None, timeout: float = 30.0) -> None:
        self.path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.timeout = timeout
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(str(self.path), timeout=self.timeout)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys=ON")
        return connection

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        with closing(self.connect()) as connection:
            try:
                yield connection
                connection.commit()
            except Exception:
                connection.rollback()
                raise

    def init_db(self) -> None:
        with self.transaction() as connection:
            connection.execute("PRAGMA journal_mode=WAL")
            for statement in ALL_SCHEMAS:
                connection.execute(statement)
        logger.info("db.init path=%s", self.path)


def seed_defaults(
    database: SalesDatabase,
    username: str,
    password_hash: str,
    monthly_target: str,
) -> None:
    with database.transaction() as connection:
        users = connection.execute("SELECT COUNT(*) AS count FROM users").fetchone()
        if users["count"] == 0:
            connection.execute(
                "INSERT INTO users (username, password) VALUES (?, ?)",
                (username, password_hash),
            )
            logger.info("db.seed.user username=%s", username)

        profiles = connection.execute("SELECT COUNT(*) AS count FROM profiles").fetchone()
        if profiles["count"] == 0:
            connection.executemany(
                "INSERT INTO profiles (name, color) VALUES (?, ?)",
                DEFAULT_PROFILES,
            )
            logger.info("db.seed.profiles count=%d", len(DEFAULT_PROFILES))

        target = connection.execute(
            "SELECT value FROM settings WHERE key = ?",
            (MONTHLY_TARGET_KEY,),
        ).fetchone()
        if target is None:
            connection.execute(
                "INSERT INTO settings (key, value) VALUES (?, ?)",
                (MONTHLY_TARGET_KEY, monthly_target),
            )
            logger.info("db.seed.monthly_target value=%s", monthly_target)
