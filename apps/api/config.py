from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[2]


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    db_path: Path = ROOT_DIR / "data" / "sales.db"
    jwt_secret: str = "change-me"
    token_ttl_days: int = 7
    default_username: str = "admin"
    default_password: str = "admin123"
    default_monthly_target: str = "15000"
    backup_dir: Path = ROOT_DIR / "backups"
    backup_hour: int = 3
    backup_keep: int = 30
    backup_enabled: bool = True
    rate_limit_max: int = 100
    rate_limit_window: int = 15 * 60

    @classmethod
    def from_env(cls) -> "AppConfig":
        defaults = cls()
        return cls(
            db_path=Path(os.getenv("SALES_DB_PATH", str(defaults.db_path))),
            jwt_secret=os.getenv("JWT_SECRET", defaults.jwt_secret),
            token_ttl_days=int(os.getenv("TOKEN_TTL_DAYS", str(defaults.token_ttl_days))),
            default_username=os.getenv("DEFAULT_USERNAME", defaults.default_username),
            default_password=os.getenv("DEFAULT_PASSWORD", defaults.default_password),
            default_monthly_target=os.getenv("DEFAULT_MONTHLY_TARGET", defaults.default_monthly_target),
            backup_dir=Path(os.getenv("BACKUP_DIR", str(defaults.backup_dir))),
            backup_hour=int(os.getenv("BACKUP_HOUR", str(defaults.backup_hour))),
            backup_keep=int(os.getenv("BACKUP_KEEP", str(defaults.backup_keep))),
            backup_enabled=_env_bool("BACKUP_ENABLED", defaults.backup_enabled),
            rate_limit_max=int(os.getenv("RATE_LIMIT_MAX", str(defaults.rate_limit_max))),
            rate_limit_window=int(os.getenv("RATE_LIMIT_WINDOW", str(defaults.rate_limit_window))),
        )
