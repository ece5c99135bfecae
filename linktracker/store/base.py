"""
Link Store Interface

This module defines the storage contract the link service depends on.
Backends (in-memory, relational, ...) implement it so the service and the
pure accounting code never know where links live.
"""

from abc import ABC, abstractmethod
from typing import Callable, List

from linktracker.core.link import Link

# Receives the current record, returns its replacement (or raises to abort)
LinkMutator = Callable[[Link], Link]


class LinkStore(ABC):
    """
    Abstract base class for link stores.
    
    Every method is a coroutine; blocking only ever happens here.
    
    Error contract:
    - LinkNotFoundError for an absent id (fetch, update, delete)
    - DuplicateIdentifierError when inserting an existing id
    - BackendUnavailableError for any storage failure
    """
    
    @abstractmethod
    async def insert(self, link: Link) -> None:
        """
        Store a new link.
        
        Raises:
            DuplicateIdentifierError: If a link with the same id exists
        """
        pass
    
    @abstractmethod
    async def fetch(self, link_id: str) -> Link:
        """
        Return the stored link.
        
        Raises:
            LinkNotFoundError: If the id is unknown
        """
        pass
    
    @abstractmethod
    async def update(self, link_id: str, mutator: LinkMutator) -> Link:
        """
        Atomically replace a link with mutator(current).
        
        Concurrent updates of the same id are serialized so no update is
        lost. If the mutator raises, nothing is written and the exception
        propagates unchanged.
        
        Returns:
            The link as written
        
        Raises:
            LinkNotFoundError: If the id is unknown
        """
        pass
    
    @abstractmethod
    async def enumerate(self) -> List[Link]:
        """Return a snapshot of all stored links, in no particular order."""
        pass
    
    @abstractmethod
    async def delete(self, link_id: str) -> None:
        """
        Remove a link.
        
        Raises:
            LinkNotFoundError: If the id is unknown
        """
        pass
    
    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored links."""
        pass
    
    async def close(self) -> None:
        """Release backend resources. No-op unless the backend holds any."""
        pass
