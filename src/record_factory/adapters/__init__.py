"""Database adapters package.

Provides the ``DatabaseClient`` Protocol and concrete async adapter
implementations for PostgreSQL and for in-memory storage.

Usage:
    from record_factory.adapters import DatabaseClient, AsyncPostgresAdapter, InMemoryAdapter
"""

from record_factory.adapters.base import DatabaseClient
from record_factory.adapters.memory import InMemoryAdapter
from record_factory.adapters.postgres import AsyncPostgresAdapter

__all__ = [
    "DatabaseClient",
    "AsyncPostgresAdapter",
    "InMemoryAdapter",
]
