"""
Entity service base - shared CRUD orchestration.

Each relation-bearing entity service declares its table, messages and
hooks; this base runs every operation in one store transaction:
validate references and unique keys, write, then expand related
summaries for the response.

Update payloads are partial: a key absent from ``changes`` is left
untouched, an explicit None clears an optional relation, and any other
value is validated before being written.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from .credentials import utc_now
from .exceptions import NotFound
from .integrity import IntegrityValidator
from .ports import Record, RecordSession, RecordStore


def plain(values: Mapping[str, Any]) -> dict[str, Any]:
    """Copy values, unwrapping enum members to their stored value."""
    return {key: value.value if isinstance(value, Enum) else value for key, value in values.items()}


@dataclass
class EntityService:
    """Base CRUD service over one table."""

    store: RecordStore

    table: ClassVar[str]
    not_found_message: ClassVar[str]
    order_by: ClassVar[tuple[str, ...]] = ("id",)

    def create(self, values: Mapping[str, Any]) -> Record:
        values = plain(values)
        with self.store.transaction() as session:
            self.validate_create(IntegrityValidator(session), values)
            record = session.insert(self.table, values)
            self.after_create(session, record)
            return self.expand(session, record)

    def find_all(self) -> list[Record]:
        with self.store.transaction() as session:
            records = session.find_all(self.table, order_by=self.order_by)
            return [self.expand(session, record) for record in records]

    def find_one(self, record_id: int) -> Record:
        with self.store.transaction() as session:
            return self.expand(session, self._get_or_raise(session, record_id))

    def update(self, record_id: int, changes: Mapping[str, Any]) -> Record:
        changes = plain(changes)
        with self.store.transaction() as session:
            existing = self._get_or_raise(session, record_id)
            changes = self.validate_update(IntegrityValidator(session), existing, changes)
            if changes:
                changes.setdefault("updated_at", utc_now())
                record = session.update(self.table, record_id, changes)
            else:
                record = existing
            return self.expand(session, record)

    def remove(self, record_id: int) -> Record:
        """Delete a record and return its last expanded state."""
        with self.store.transaction() as session:
            existing = self.expand(session, self._get_or_raise(session, record_id))
            session.delete(self.table, record_id)
            return existing

    # Hooks

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        """Check references and unique keys of a new record. May fill defaults."""

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """Check supplied changes and return the columns to write."""
        return changes

    def after_create(self, session: RecordSession, record: Record) -> None:
        """Side effects that belong to the creating transaction."""

    def expand(self, session: RecordSession, record: Record) -> Record:
        """Attach related summaries to a record for responses."""
        return record

    def _get_or_raise(self, session: RecordSession, record_id: int) -> Record:
        record = session.get(self.table, record_id)
        if record is None:
            raise NotFound(self.not_found_message)
        return record
