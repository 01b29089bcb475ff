"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition tests. All of
them run against PostgreSQL and are skipped when it is unreachable.
"""

import pytest

from tests.postgres import clean_database, pg_store, pool  # noqa: F401

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial
