"""
Database Abstraction Interface

This module defines the database abstraction layer that allows switching between
different database backends (SQLite, PostgreSQL, etc.) for the relational link
store without changing the rest of the codebase.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool
from sqlalchemy.sql import Select


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.
    
    This interface defines the contract that all database implementations
    must follow. By using this abstraction, we can switch between SQLite,
    PostgreSQL, or any other database without modifying the link store.
    
    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Update the factory function to return the new adapter
    """
    
    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.
        
        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine configuration options
        
        Returns:
            Configured AsyncEngine instance
        """
        pass
    
    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """
        Get the connection pool class for this database type.
        
        Returns:
            Pool class (e.g., NullPool for SQLite, QueuePool for PostgreSQL)
            or None to use default
        """
        pass
    
    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """
        Get connection arguments specific to this database type.
        
        Returns:
            Dictionary of connection arguments
        """
        pass
    
    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """
        Get additional engine configuration specific to this database type.
        
        Returns:
            Dictionary of engine configuration options
        """
        pass
    
    @abstractmethod
    def lock_for_update(self, statement: Select) -> Select:
        """
        Apply the dialect's row locking to a SELECT used before an update.
        
        Args:
            statement: SELECT statement reading the row about to be modified
        
        Returns:
            Statement with locking applied (or unchanged if unsupported)
        """
        pass
    
    @abstractmethod
    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for this database.
        
        Returns:
            Dialect name (e.g., 'sqlite', 'postgresql')
        """
        pass
