import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from quart import current_app
from redis.exceptions import LockError

from .config import Settings
from .errors import BackendError
from .redis_client import get_redis

_logger = logging.getLogger(__name__)


class SheetLocks:
    """Serialises read-modify-write sequences against one spreadsheet.

    The local backend only covers a single process; the redis backend is
    shared by every gateway instance pointing at the same Redis.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._local: Dict[str, asyncio.Lock] = {}

    @property
    def backend(self) -> str:
        return (self._settings.LOCK_BACKEND or "local").strip().lower()

    @asynccontextmanager
    async def hold(self, spreadsheet_id: str) -> AsyncIterator[None]:
        if self.backend == "redis":
            async with self._redis_lock(spreadsheet_id):
                yield
            return
        lock = self._local.setdefault(spreadsheet_id, asyncio.Lock())
        async with lock:
            yield

    @asynccontextmanager
    async def _redis_lock(self, spreadsheet_id: str) -> AsyncIterator[None]:
        r = await get_redis(self._settings)
        timeout = self._settings.LOCK_TIMEOUT
        lock = r.lock(f"sheet-lock:{spreadsheet_id}", timeout=timeout, blocking_timeout=timeout)
        try:
            acquired = await lock.acquire()
        except LockError as e:
            raise BackendError("Spreadsheet is busy, please retry", error=str(e)) from e
        if not acquired:
            _logger.warning("Timed out waiting for sheet lock | spreadsheet_id=%s", spreadsheet_id)
            raise BackendError("Spreadsheet is busy, please retry", error="lock timeout")
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError as e:
                # lock expired while held; the next writer may already own it
                _logger.warning("Sheet lock lost before release | spreadsheet_id=%s err=%s", spreadsheet_id, e)


def get_locks() -> SheetLocks:
    return current_app.sheet_locks
