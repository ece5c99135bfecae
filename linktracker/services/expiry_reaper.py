"""
Expiry Reaper

Periodically deletes links whose expiry has passed.

Design:
- sweep() does one enumerate + delete pass and can be called directly
  (tests drive it with a fake clock instead of waiting)
- start() runs sweep() every interval_seconds on an asyncio task
- Deletes target one id each; an id already removed by someone else is
  skipped, so sweeping concurrently with request traffic is safe
"""

import asyncio
import logging
from typing import Optional

from linktracker.core.clock import Clock, utcnow
from linktracker.core.exceptions import LinkNotFoundError
from linktracker.store.base import LinkStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60 * 60


class ExpiryReaper:
    """Background sweep removing expired links from a store."""
    
    def __init__(
        self,
        store: LinkStore,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: Clock = utcnow
    ):
        if interval_seconds <= 0:
            raise ValueError("Reaper interval must be positive")
        self.store = store
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._task: Optional[asyncio.Task] = None
    
    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
    
    async def sweep(self) -> int:
        """
        Delete every link expired as of now.
        
        Returns:
            Number of links this sweep removed
        """
        now = self.clock()
        removed = 0
        
        for link in await self.store.enumerate():
            if not link.is_expired(now):
                continue
            try:
                await self.store.delete(link.id)
            except LinkNotFoundError:
                continue
            removed += 1
        
        remaining = await self.store.count()
        logger.info(f"Cleaned up {removed} expired links. Current links: {remaining}")
        return removed
    
    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.sweep()
            except Exception as e:
                # Next tick retries; the links are still expired then
                logger.error(f"Expiry sweep failed: {str(e)}", exc_info=True)
    
    def start(self) -> None:
        """Schedule periodic sweeps on the running event loop."""
        if self.running:
            logger.warning("Expiry reaper already running")
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Expiry reaper started: interval={self.interval_seconds}s")
    
    async def stop(self) -> None:
        """Cancel the periodic task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Expiry reaper stopped")
