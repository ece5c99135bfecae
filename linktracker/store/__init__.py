"""
Link store implementations.

- LinkStore: interface the link service depends on
- InMemoryLinkStore: process-local dict (default)
- SQLLinkStore: relational table through SQLModel

build_link_store() picks one from settings.
"""

import logging

from linktracker.core.setting import Settings, StorageBackend
from linktracker.db.session import create_engine, init_models
from linktracker.db.sqlite_adapter import get_database_adapter
from linktracker.store.base import LinkMutator, LinkStore
from linktracker.store.memory import InMemoryLinkStore
from linktracker.store.sql import SQLLinkStore

__all__ = [
    "LinkMutator",
    "LinkStore",
    "InMemoryLinkStore",
    "SQLLinkStore",
    "build_link_store",
]

logger = logging.getLogger(__name__)


async def build_link_store(settings: Settings) -> LinkStore:
    """
    Create the link store selected by STORAGE_BACKEND.
    
    For the relational backend the tables are created if missing.
    """
    if settings.STORAGE_BACKEND == StorageBackend.sql:
        adapter = get_database_adapter()
        engine = create_engine(settings.DATABASE_URL, adapter=adapter)
        await init_models(engine)
        logger.info(f"Relational link store ready: dialect={adapter.get_dialect_name()}")
        return SQLLinkStore(
            engine,
            adapter=adapter,
            max_retries=settings.UPDATE_MAX_RETRIES
        )
    logger.info("In-memory link store ready")
    return InMemoryLinkStore()
