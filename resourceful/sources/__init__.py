"""
Resourceful — Reference Data Sources
=====================================

    - memory.py: MemoryDataSource, thread-safe dict store
    - sql.py:    SQLAlchemyDataSource, async SQLAlchemy ORM adapter

Applications are free to implement resourceful.resource.DataSource directly.
"""

from resourceful.sources.memory import MemoryDataSource
from resourceful.sources.sql import SQLAlchemyDataSource

__all__ = ["MemoryDataSource", "SQLAlchemyDataSource"]
