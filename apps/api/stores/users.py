from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..db.session import SalesDatabase

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, database: SalesDatabase) -> None:
        self.database = database

    def get_by_username(self, username: str) -> Optional[dict]:
        with self.database.transaction() as connection:
            row = connection.execute(
                "SELECT * FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        return dict(row) if row else None

    def check_password(self, username: str, password: str) -> Optional[dict]:
        user = self.get_by_username(username)
        if user is None or not check_password_hash(user["password"], password):
            return None
        return user

    def update_password(self, username: str, new_password: str) -> None:
        with self.database.transaction() as connection:
            connection.execute(
                "UPDATE users SET password = ? WHERE username = ?",
                (generate_password_hash(new_password), username),
            )
        logger.info("users.update_password username=%s", username)
