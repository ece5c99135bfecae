"""
In-Memory Link Store

Keeps links in a dict owned by the store instance. Suitable for a single
process; contents are lost on restart.

Concurrency:
- One asyncio.Lock per link id serializes read-modify-write cycles on
  that id, so concurrent clicks never overwrite each other
- Different ids use different locks and never wait on each other
"""

import asyncio
from typing import Dict, List

from linktracker.core.exceptions import DuplicateIdentifierError, LinkNotFoundError
from linktracker.core.link import Link
from linktracker.store.base import LinkMutator, LinkStore


class InMemoryLinkStore(LinkStore):
    """Link store backed by a process-local dictionary."""
    
    def __init__(self):
        self._links: Dict[str, Link] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
    
    def _lock_for(self, link_id: str) -> asyncio.Lock:
        # setdefault runs without an await, so two coroutines can't create different locks
        return self._locks.setdefault(link_id, asyncio.Lock())
    
    async def insert(self, link: Link) -> None:
        if link.id in self._links:
            raise DuplicateIdentifierError(link.id)
        self._links[link.id] = link
    
    async def fetch(self, link_id: str) -> Link:
        link = self._links.get(link_id)
        if link is None:
            raise LinkNotFoundError(link_id)
        return link
    
    async def update(self, link_id: str, mutator: LinkMutator) -> Link:
        """
        Apply mutator under the per-id lock.
        
        The record is re-read after the lock is acquired, so a delete that
        slipped in while waiting surfaces as LinkNotFoundError. The lock of
        an unknown id is dropped so lookups of bogus ids do not accumulate.
        """
        lock = self._lock_for(link_id)
        async with lock:
            current = self._links.get(link_id)
            if current is None:
                if self._locks.get(link_id) is lock:
                    del self._locks[link_id]
                raise LinkNotFoundError(link_id)
            updated = mutator(current)
            self._links[link_id] = updated
            return updated
    
    async def enumerate(self) -> List[Link]:
        return list(self._links.values())
    
    async def delete(self, link_id: str) -> None:
        if self._links.pop(link_id, None) is None:
            raise LinkNotFoundError(link_id)
        lock = self._locks.get(link_id)
        if lock is not None and not lock.locked():
            del self._locks[link_id]
    
    async def count(self) -> int:
        return len(self._links)
