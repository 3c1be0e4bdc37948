from __future__ import annotations

import asyncio
import logging
import sqlite3
from contextlib import closing
from datetime import date as date_module, datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Union

from .db.session import SalesDatabase

logger = logging.getLogger(__name__)


class BackupManager:
    def __init__(
        self,
        database: SalesDatabase,
        backup_dir: Union[str, Path],
        keep: int = 30,
    ) -> None:
        self.database = database
        self.backup_dir = Path(backup_dir)
        self.keep = keep

    def create_backup(self, today: Optional[date_module] = None) -> Path:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        stamp = (today or date_module.today()).isoformat()
        target_path = self.backup_dir / f"backup_{stamp}.db"
        # The online backup API copies a consistent snapshot without blocking writers.
        with closing(self.database.connect()) as source, closing(sqlite3.connect(str(target_path))) as target:
            source.backup(target)
        logger.info("backup.created path=%s", target_path)
        self.clean_old_backups()
        return target_path

    def list_backups(self) -> List[Path]:
        if not self.backup_dir.exists():
            return []
        files = [
            path
            for path in self.backup_dir.iterdir()
            if path.name.startswith("backup_") and path.suffix == ".db"
        ]
        return sorted(files, key=lambda path: path.stat().st_mtime, reverse=True)

    def clean_old_backups(self) -> List[Path]:
        removed = []
        for path in self.list_backups()[self.keep:]:
            path.unlink()
            removed.append(path)
            logger.info("backup.removed path=%s", path)
        return removed


def seconds_until(hour: int, now: datetime) -> float:
    next_run = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if now >= next_run:
        next_run += timedelta(days=1)
    return (next_run - now).total_seconds()


class BackupScheduler:
    """Daily backup loop owned by the application lifespan."""

    def __init__(
        self,
        manager: BackupManager,
        hour: int = 3,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.manager = manager
        self.hour = hour
        self._clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="sales-backup")
        logger.info("backup.scheduler.start hour=%s", self.hour)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("backup.scheduler.stop")

    async def run_once(self) -> Optional[Path]:
        try:
            return await asyncio.to_thread(self.manager.create_backup)
        except Exception:
            logger.exception("backup.scheduler.failed")
            return None

    async def _run(self) -> None:
        while True:
            delay = seconds_until(self.hour, self._clock())
            logger.info("backup.scheduler.sleep seconds=%.0f", delay)
            await asyncio.sleep(delay)
            await self.run_once()
