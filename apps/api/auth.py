from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

import jwt
from fastapi import Header, HTTPException, Request

from .errors import InvalidInput
from .stores import UserStore

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
MIN_PASSWORD_LENGTH = 6


class AuthService:
    def __init__(self, users: UserStore, secret: str, token_ttl_days: int = 7) -> None:
        self.users = users
        self.secret = secret
        self.token_ttl = dt.timedelta(days=token_ttl_days)

    def issue_token(self, user: dict) -> str:
        now = dt.datetime.now(dt.timezone.utc)
        payload = {
            "id": user["id"],
            "username": user["username"],
            "iat": int(now.timestamp()),
            "exp": int((now + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> dict:
        payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        return {"id": payload["id"], "username": payload["username"]}

    def login(self, username: str, password: str) -> Optional[dict]:
        user = self.users.check_password(username, password)
        if user is None:
            logger.warning("auth.login.rejected username=%s", username)
            return None
        logger.info("auth.login.ok username=%s", username)
        return {
            "token": self.issue_token(user),
            "user": {"id": user["id"], "username": user["username"]},
        }

    def change_password(self, username: str, current_password: str, new_password: str) -> bool:
        if not current_password or not new_password:
            raise InvalidInput("Current and new password are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise InvalidInput(f"New password must have at least {MIN_PASSWORD_LENGTH} characters")
        if self.users.check_password(username, current_password) is None:
            return False
        self.users.update_password(username, new_password)
        return True


def current_user(request: Request, authorization: Optional[str] = Header(default=None)) -> dict:
    """FastAPI dependency resolving the bearer token to ``{id, username}``."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Token not provided")
    token = authorization.split(" ", 1)[1].strip()
    try:
        return request.app.state.auth.verify_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=403, detail="Token expired")
    except (jwt.InvalidTokenError, KeyError):
        raise HTTPException(status_code=403, detail="Invalid token")
