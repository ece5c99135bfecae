"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

Key characteristics:
- File-based (single .db file)
- No server required
- Single writer at a time (file locking), so writers wait on a busy timeout
"""

from typing import Any
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import Select

from linktracker.db.interface import DatabaseAdapter

# Seconds a connection waits for another writer to release the file lock
SQLITE_BUSY_TIMEOUT = 30


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.
    
    This adapter handles all SQLite-specific configuration and operations.
    """
    
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.
        
        SQLite-specific configuration:
        - NullPool: Single connection (file-based, no pooling needed)
        - check_same_thread=False: Required for async SQLite operations
        - timeout: Busy wait for concurrent click updates
        
        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)
        
        Returns:
            Configured AsyncEngine for SQLite
        """
        connect_args = self.get_connect_args()
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)
        
        return create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=connect_args,
            **engine_kwargs
        )
    
    def get_pool_class(self) -> type[NullPool]:
        """
        Get the connection pool class for SQLite.
        
        Returns:
            NullPool class
        """
        return NullPool
    
    def get_connect_args(self) -> dict[str, Any]:
        """
        Get SQLite-specific connection arguments.
        
        Returns:
            Dictionary with SQLite connection arguments
        """
        return {
            "check_same_thread": False,
            "timeout": SQLITE_BUSY_TIMEOUT,
        }
    
    def get_engine_kwargs(self) -> dict[str, Any]:
        """
        Get SQLite-specific engine configuration.
        
        Returns:
            Dictionary with SQLite engine options
        """
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }
    
    def lock_for_update(self, statement: Select) -> Select:
        """
        SQLite has no row locks; the SQLite dialect renders FOR UPDATE as nothing,
        so the version check in the update statement is what serializes writers.
        """
        return statement.with_for_update(nowait=False)
    
    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for SQLite.
        
        Returns:
            'sqlite'
        """
        return "sqlite"


def get_database_adapter() -> DatabaseAdapter:
    """
    Factory function to get the database adapter.
    
    Returns SQLiteAdapter by default. To switch to PostgreSQL, create a
    PostgreSQLAdapter class and update this function.
    
    Returns:
        DatabaseAdapter instance
    """
    return SQLiteAdapter()
