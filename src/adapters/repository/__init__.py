"""Record store adapters - PostgreSQL and in-memory implementations."""

from .memory import MemoryRecordStore
from .postgres import PostgresRecordStore, run_migrations

__all__ = ["MemoryRecordStore", "PostgresRecordStore", "run_migrations"]
