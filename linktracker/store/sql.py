"""
Relational Link Store

Persists links in the `links` table through SQLModel on an async
SQLAlchemy engine. The database dialect is hidden behind DatabaseAdapter.

Atomic updates:
- Each row carries a version counter
- update() reads the row, applies the mutator in memory, then issues
  UPDATE ... WHERE id = :id AND version = :read_version
- If another writer got there first the UPDATE matches no row and the
  cycle is retried with a fresh read, up to max_retries times
- This needs no long-held locks, so it works the same on SQLite and
  server databases
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from linktracker.core.clock import as_utc
from linktracker.core.exceptions import (
    BackendUnavailableError,
    DuplicateIdentifierError,
    LinkNotFoundError,
)
from linktracker.core.link import Link
from linktracker.db.interface import DatabaseAdapter
from linktracker.db.models import LinkRecord
from linktracker.db.session import create_session_maker
from linktracker.db.sqlite_adapter import get_database_adapter
from linktracker.store.base import LinkMutator, LinkStore

logger = logging.getLogger(__name__)


def record_to_link(record: LinkRecord) -> Link:
    """Convert a database row into a domain link."""
    return Link(
        id=record.id,
        created=as_utc(record.created),
        expires=as_utc(record.expires),
        campaign=record.campaign,
        clicks=record.clicks,
        unique_clicks=record.unique_clicks,
        clickers=frozenset(record.clickers or ()),
        last_accessed=as_utc(record.last_accessed) if record.last_accessed else None,
    )


def link_to_values(link: Link) -> dict:
    """Column values for a domain link (without id and version)."""
    return {
        "created": as_utc(link.created),
        "expires": as_utc(link.expires),
        "campaign": link.campaign,
        "clicks": link.clicks,
        "unique_clicks": link.unique_clicks,
        "clickers": sorted(link.clickers),
        "last_accessed": as_utc(link.last_accessed) if link.last_accessed else None,
    }


class SQLLinkStore(LinkStore):
    """
    Link store backed by a relational database.
    
    Tables must exist before use (see linktracker.db.init_models or the
    Alembic migrations).
    """
    
    def __init__(
        self,
        engine: AsyncEngine,
        session_maker: Optional[async_sessionmaker] = None,
        adapter: Optional[DatabaseAdapter] = None,
        max_retries: int = 10
    ):
        """
        Initialize the relational link store.
        
        Args:
            engine: Async engine the store owns and disposes on close()
            session_maker: Session factory (built from engine if omitted)
            adapter: Dialect adapter used for row locking hints
            max_retries: Optimistic update attempts before giving up
        """
        self.engine = engine
        self.session_maker = session_maker or create_session_maker(engine)
        self.adapter = adapter or get_database_adapter()
        self.max_retries = max_retries
    
    async def insert(self, link: Link) -> None:
        record = LinkRecord(id=link.id, version=0, **link_to_values(link))
        try:
            async with self.session_maker() as session:
                session.add(record)
                await session.commit()
        except IntegrityError as e:
            raise DuplicateIdentifierError(link.id) from e
        except SQLAlchemyError as e:
            raise BackendUnavailableError(
                f"Failed to insert link '{link.id}': {str(e)}",
                original_error=e
            ) from e
    
    async def _read(self, link_id: str) -> Optional[LinkRecord]:
        statement = self.adapter.lock_for_update(
            select(LinkRecord).where(LinkRecord.id == link_id)
        )
        async with self.session_maker() as session:
            result = await session.execute(statement)
            return result.scalars().first()
    
    async def fetch(self, link_id: str) -> Link:
        try:
            record = await self._read(link_id)
        except SQLAlchemyError as e:
            raise BackendUnavailableError(
                f"Failed to fetch link '{link_id}': {str(e)}",
                original_error=e
            ) from e
        if record is None:
            raise LinkNotFoundError(link_id)
        return record_to_link(record)
    
    async def update(self, link_id: str, mutator: LinkMutator) -> Link:
        """
        Compare-and-swap the row on its version counter.
        
        The read and the conditional write run in separate short
        transactions so a SQLite reader never blocks another writer's
        lock upgrade.
        
        Raises:
            LinkNotFoundError: If the row does not exist (or vanished mid-retry)
            BackendUnavailableError: On storage failure or persistent contention
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                record = await self._read(link_id)
            except SQLAlchemyError as e:
                raise BackendUnavailableError(
                    f"Failed to read link '{link_id}': {str(e)}",
                    original_error=e
                ) from e
            
            if record is None:
                raise LinkNotFoundError(link_id)
            
            updated = mutator(record_to_link(record))
            
            statement = (
                update(LinkRecord)
                .where(LinkRecord.id == link_id)
                .where(LinkRecord.version == record.version)
                .values(version=record.version + 1, **link_to_values(updated))
            )
            try:
                async with self.session_maker() as session:
                    result = await session.execute(statement)
                    await session.commit()
            except SQLAlchemyError as e:
                raise BackendUnavailableError(
                    f"Failed to update link '{link_id}': {str(e)}",
                    original_error=e
                ) from e
            
            if result.rowcount == 1:
                return updated
            
            logger.debug(f"Version conflict on link {link_id} (attempt {attempt}), retrying")
        
        raise BackendUnavailableError(
            f"Link '{link_id}' is under heavy concurrent modification; "
            f"gave up after {self.max_retries} attempts"
        )
    
    async def enumerate(self) -> List[Link]:
        try:
            async with self.session_maker() as session:
                result = await session.execute(select(LinkRecord))
                records = result.scalars().all()
        except SQLAlchemyError as e:
            raise BackendUnavailableError(
                f"Failed to enumerate links: {str(e)}",
                original_error=e
            ) from e
        return [record_to_link(record) for record in records]
    
    async def delete(self, link_id: str) -> None:
        try:
            async with self.session_maker() as session:
                result = await session.execute(
                    delete(LinkRecord).where(LinkRecord.id == link_id)
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise BackendUnavailableError(
                f"Failed to delete link '{link_id}': {str(e)}",
                original_error=e
            ) from e
        if result.rowcount == 0:
            raise LinkNotFoundError(link_id)
    
    async def count(self) -> int:
        try:
            async with self.session_maker() as session:
                result = await session.execute(select(func.count()).select_from(LinkRecord))
                return result.scalar() or 0
        except SQLAlchemyError as e:
            raise BackendUnavailableError(
                f"Failed to count links: {str(e)}",
                original_error=e
            ) from e
    
    async def close(self) -> None:
        await self.engine.dispose()
