"""
Referential integrity validator.

Every relation-bearing service runs these checks inside the same store
transaction as the write that follows them:

1. A provided foreign key must resolve to an existing parent (NotFound).
2. A uniqueness-constrained key must not be held by another row (Conflict).
   The row being updated is excluded by primary key.

The store's own unique constraints remain the authoritative backstop; the
adapters translate a lost race into the same Conflict.
"""

from typing import Any

from .exceptions import Conflict, NotFound
from .ports import Record, RecordSession


class IntegrityValidator:
    """Existence and uniqueness checks bound to one transaction."""

    def __init__(self, session: RecordSession) -> None:
        self._session = session

    def require(self, table: str, record_id: int, message: str) -> Record:
        """Resolve a mandatory reference or raise NotFound with message."""
        record = self._session.get(table, record_id)
        if record is None:
            raise NotFound(message)
        return record

    def require_if_set(self, table: str, record_id: int | None, message: str) -> Record | None:
        """Resolve an optional reference; None means no relation."""
        if record_id is None:
            return None
        return self.require(table, record_id, message)

    def ensure_unique(
        self, table: str, message: str, exclude_id: int | None = None, **key: Any
    ) -> None:
        """
        Raise Conflict when another row already holds key.

        Args:
            table: Table holding the constraint
            message: Conflict message
            exclude_id: Primary key of the row being updated, if any
            key: Column values forming the unique key
        """
        existing = self._session.find_one(table, **key)
        if existing is not None and existing["id"] != exclude_id:
            raise Conflict(message)
