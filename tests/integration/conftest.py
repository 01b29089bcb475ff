"""
Shared fixtures for integration tests.

PostgreSQL-backed tests are skipped when the database is unreachable.
"""

from tests.postgres import clean_database, pg_store, pool  # noqa: F401
