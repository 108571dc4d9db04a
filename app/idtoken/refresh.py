"""Background refresh of provider key sets."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from .errors import KeyFetchError
from .jwks_cache import JWKSCache

logger = logging.getLogger(__name__)


class KeyRefresher:
    """
    Periodically refreshes each ``JWKSCache`` off the event loop.

    Verification never waits on this task; it only keeps the snapshots warm
    so that requests rarely hit the cache-miss path. A failed refresh is
    logged and retried on the next tick.
    """

    def __init__(self, caches: Sequence[JWKSCache], interval_seconds: float) -> None:
        self._caches = list(caches)
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_all(self) -> None:
        for cache in self._caches:
            try:
                await asyncio.to_thread(cache.refresh)
            except KeyFetchError as e:
                logger.warning("Background JWKS refresh failed: %s", e.detail)

    async def _run(self) -> None:
        while True:
            await self.refresh_all()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        if self._interval <= 0 or not self._caches or self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Key refresh started interval=%ss caches=%d", self._interval, len(self._caches))

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
