"""Advisory cross-process lock for a single database file.

The lock is a sibling ``<db>.lock`` file created exclusively. Its holder
refreshes the mtime on a heartbeat; a lock file that has not been touched
for ``stale_after`` seconds belongs to a dead process and is broken.
"""

import asyncio
import contextlib
import json
import os
import time
from datetime import datetime, timezone
from pathlib import Path

from thinkmem.core.errors import StorageError
from thinkmem.core.logging import get_logger

logger = get_logger("storage.lock")

INITIAL_BACKOFF = 0.05
MAX_BACKOFF = 1.0


class FileLock:
    """Exclusive advisory lock with stale detection and heartbeat."""

    def __init__(
        self,
        path: Path,
        stale_after: float = 30.0,
        heartbeat_interval: float = 10.0,
        timeout: float = 30.0,
    ):
        self.path = Path(path)
        self.stale_after = stale_after
        self.heartbeat_interval = heartbeat_interval
        self.timeout = timeout
        self._heartbeat: asyncio.Task | None = None
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def _try_create(self) -> bool:
        try:
            fd = os.open(str(self.path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o600)
        except FileExistsError:
            return False
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(
                {"pid": os.getpid(), "acquiredAt": datetime.now(timezone.utc).isoformat()},
                f,
            )
        return True

    def _is_stale(self) -> bool:
        try:
            age = time.time() - self.path.stat().st_mtime
        except FileNotFoundError:
            # released between our create attempt and the stat
            return False
        return age > self.stale_after

    async def acquire(self) -> None:
        if self._held:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        deadline = time.monotonic() + self.timeout
        backoff = INITIAL_BACKOFF

        while not self._try_create():
            if self._is_stale():
                logger.warning(f"Breaking stale lock: {self.path}")
                with contextlib.suppress(FileNotFoundError):
                    self.path.unlink()
                continue
            if time.monotonic() >= deadline:
                raise StorageError(
                    f"database is locked by another process (lock: {self.path}, "
                    f"waited {self.timeout:.1f}s)"
                )
            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, MAX_BACKOFF)

        self._held = True
        self._heartbeat = asyncio.create_task(self._beat())
        logger.debug(f"Acquired lock: {self.path}")

    async def _beat(self) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            try:
                os.utime(self.path)
            except FileNotFoundError:
                logger.error(f"Lock file vanished while held: {self.path}")
                return

    async def release(self) -> None:
        if not self._held:
            return
        if self._heartbeat:
            self._heartbeat.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._heartbeat
            self._heartbeat = None
        with contextlib.suppress(FileNotFoundError):
            self.path.unlink()
        self._held = False
        logger.debug(f"Released lock: {self.path}")
