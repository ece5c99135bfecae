"""
Database Session Management

This module builds async engines and session factories for the relational
link store. Nothing is created at import time: the application wiring (or a
test) calls these factories with the URL it wants, so several stores can
coexist in one process.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from linktracker.db.interface import DatabaseAdapter
from linktracker.db.sqlite_adapter import get_database_adapter


def create_engine(database_url: str, adapter: DatabaseAdapter = None) -> AsyncEngine:
    """
    Create an async engine through the database adapter.
    
    Args:
        database_url: Connection string for the database
        adapter: Adapter to use (defaults to get_database_adapter())
    
    Returns:
        Configured AsyncEngine
    """
    adapter = adapter or get_database_adapter()
    return adapter.create_engine(database_url)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create the async session factory bound to an engine.
    
    Sessions keep loaded objects usable after commit so records can be
    converted to domain links once the transaction is closed.
    """
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
        autoflush=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create every table known to SQLModel metadata if it does not exist yet."""
    # Register table models on the metadata before create_all
    from linktracker.db import models  # noqa: F401
    
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
