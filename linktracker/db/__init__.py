"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- Session management: engine and session factory construction

To add a new database backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Update get_database_adapter() in sqlite_adapter.py to return the new adapter
"""

from linktracker.db.interface import DatabaseAdapter
from linktracker.db.session import create_engine, create_session_maker, init_models

__all__ = [
    "DatabaseAdapter",
    "create_engine",
    "create_session_maker",
    "init_models",
]
