"""Local store implementations for InsightVault."""

from insightvault.providers.base import LocalStore
from insightvault.providers.memory_store import InMemoryLocalStore
from insightvault.providers.migrations import MIGRATIONS, SCHEMA_VERSION, Migration
from insightvault.providers.sqlite_store import SqliteLocalStore

__all__ = [
    "LocalStore",
    "InMemoryLocalStore",
    "SqliteLocalStore",
    "Migration",
    "MIGRATIONS",
    "SCHEMA_VERSION",
]
