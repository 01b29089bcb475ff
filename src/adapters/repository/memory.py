"""
In-memory record store adapter - Implements the RecordStore protocol.

Mirrors the constraint semantics of migrations/001_initial_schema.sql:
column defaults, unique keys (NULLs never collide), row CHECK constraints,
foreign key existence on write and ON DELETE RESTRICT / CASCADE / SET NULL.
Used by the test suite and by local runs with STORAGE_BACKEND=memory.

A transaction holds a re-entrant lock for its whole duration, so concurrent
callers see serialised check-then-write sequences. The first write of a
transaction snapshots the tables; the snapshot is restored when the block
raises. Read-only transactions copy nothing.
"""

import copy
import logging
import threading
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from src.domain.exceptions import Conflict
from src.domain.ports import Record

from .constraints import REFERENCE_CONFLICT, STATE_CONFLICT, UNIQUE_CONFLICT

logger = logging.getLogger(__name__)

RESTRICT = "RESTRICT"
CASCADE = "CASCADE"
SET_NULL = "SET NULL"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ForeignKey:
    column: str
    references: str
    on_delete: str = RESTRICT


@dataclass(frozen=True)
class TableSpec:
    """Columns with their defaults plus the table's constraints."""

    columns: Mapping[str, Any]
    unique: tuple[tuple[str, ...], ...] = ()
    foreign_keys: tuple[ForeignKey, ...] = ()
    checks: Mapping[str, Callable[[Record], bool]] = field(default_factory=dict)
    timestamps: bool = field(default=True)


SCHEMA: dict[str, TableSpec] = {
    "users": TableSpec(
        columns={
            "name": None,
            "email": None,
            "password_hash": None,
            "role": "VOTER",
            "is_active": False,
            "activation_token": None,
            "activation_token_expiry": None,
        },
        unique=(("email",), ("activation_token",)),
        checks={
            "active_requires_password": lambda row: not row["is_active"] or row["password_hash"] is not None,
            "token_requires_expiry": lambda row: row["activation_token"] is None
            or (row["activation_token_expiry"] is not None and not row["is_active"]),
        },
    ),
    "political_groups": TableSpec(
        columns={"name": None, "short_name": None, "logo_url": None, "description": None},
    ),
    "elections": TableSpec(
        columns={"name": None, "description": None, "type": None, "date": None},
    ),
    "electoral_events": TableSpec(
        columns={
            "election_id": None,
            "name": None,
            "description": None,
            "date": None,
            "category": None,
            "is_published": True,
        },
        foreign_keys=(ForeignKey("election_id", "elections", CASCADE),),
    ),
    "candidates": TableSpec(
        columns={
            "full_name": None,
            "office": None,
            "biography": None,
            "photo_url": None,
            "political_group_id": None,
            "user_id": None,
        },
        unique=(("user_id",),),
        foreign_keys=(
            ForeignKey("political_group_id", "political_groups", RESTRICT),
            ForeignKey("user_id", "users", SET_NULL),
        ),
    ),
    "voting_centers": TableSpec(
        columns={
            "name": None,
            "address": None,
            "latitude": None,
            "longitude": None,
            "department": None,
            "province": None,
            "district": None,
            "sketch_url": None,
        },
    ),
    "voting_tables": TableSpec(
        columns={"code": None, "voting_center_id": None, "room": None, "floor": None},
        unique=(("code",),),
        foreign_keys=(ForeignKey("voting_center_id", "voting_centers", RESTRICT),),
    ),
    "voters": TableSpec(
        columns={"user_id": None, "document_number": None, "voting_table_id": None},
        unique=(("user_id",), ("document_number",)),
        foreign_keys=(
            ForeignKey("user_id", "users", CASCADE),
            ForeignKey("voting_table_id", "voting_tables", SET_NULL),
        ),
    ),
    "table_members": TableSpec(
        columns={"user_id": None, "voting_table_id": None, "role_in_table": None},
        unique=(("user_id",),),
        foreign_keys=(
            ForeignKey("user_id", "users", CASCADE),
            ForeignKey("voting_table_id", "voting_tables", CASCADE),
        ),
    ),
    "vote_intentions": TableSpec(
        columns={"user_id": None, "candidate_id": None, "election_id": None},
        unique=(("user_id", "election_id", "candidate_id"),),
        foreign_keys=(
            ForeignKey("user_id", "users", CASCADE),
            ForeignKey("candidate_id", "candidates", CASCADE),
            ForeignKey("election_id", "elections", CASCADE),
        ),
    ),
    "posts": TableSpec(
        columns={
            "title": None,
            "content": None,
            "status": "PUBLISHED",
            "author_id": None,
            "candidate_id": None,
        },
        foreign_keys=(
            ForeignKey("author_id", "users", RESTRICT),
            ForeignKey("candidate_id", "candidates", SET_NULL),
        ),
    ),
    "comments": TableSpec(
        columns={"post_id": None, "author_id": None, "content": None, "parent_id": None},
        foreign_keys=(
            ForeignKey("post_id", "posts", CASCADE),
            ForeignKey("author_id", "users", CASCADE),
            ForeignKey("parent_id", "comments", CASCADE),
        ),
    ),
    "post_moderation_alerts": TableSpec(
        columns={
            "post_id": None,
            "ai_summary": None,
            "status": "PENDING",
            "reviewed_by_admin_id": None,
            "reviewed_at": None,
        },
        foreign_keys=(
            ForeignKey("post_id", "posts", CASCADE),
            ForeignKey("reviewed_by_admin_id", "users", SET_NULL),
        ),
    ),
    "government_plans": TableSpec(
        columns={
            "political_group_id": None,
            "title": None,
            "description": None,
            "document_url": None,
            "from_year": None,
            "to_year": None,
        },
        foreign_keys=(ForeignKey("political_group_id", "political_groups", CASCADE),),
    ),
    "government_plan_sections": TableSpec(
        columns={
            "government_plan_id": None,
            "sector": None,
            "problem_identified": None,
            "strategic_objective": None,
            "indicators": None,
            "goals": None,
            "title": None,
            "content": None,
            "sort_order": 0,
        },
        foreign_keys=(ForeignKey("government_plan_id", "government_plans", CASCADE),),
    ),
    "news_items": TableSpec(
        columns={
            "title": None,
            "summary": None,
            "content": None,
            "source": None,
            "source_url": None,
            "published_at": None,
            "election_id": None,
            "political_group_id": None,
        },
        foreign_keys=(
            ForeignKey("election_id", "elections", SET_NULL),
            ForeignKey("political_group_id", "political_groups", SET_NULL),
        ),
    ),
    "guide_contents": TableSpec(
        columns={"title": None, "content": None, "category": None, "election_id": None},
        foreign_keys=(ForeignKey("election_id", "elections", SET_NULL),),
    ),
}


def _adapt(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime) and value.tzinfo is None:
        # TIMESTAMPTZ columns read naive input as UTC
        return value.replace(tzinfo=timezone.utc)
    return value


def _sort_key(column: str) -> Callable[[Record], Any]:
    # PostgreSQL sorts NULL as larger than any value
    def key(row: Record) -> tuple[bool, Any]:
        value = row.get(column)
        return (True, 0) if value is None else (False, value)

    return key


class MemoryRecordSession:
    """
    Implements RecordSession protocol over the store's dict tables.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Returned rows are copies; mutating them never touches stored state.
    """

    def __init__(self, store: "MemoryRecordStore") -> None:
        self._store = store
        self.snapshot: tuple[dict[str, dict[int, Record]], dict[str, int]] | None = None

    def get(self, table: str, record_id: int) -> Record | None:
        row = self._rows(table).get(record_id)
        return dict(row) if row is not None else None

    def find_one(self, table: str, **criteria: Any) -> Record | None:
        for row in self._matching(table, criteria):
            return dict(row)
        return None

    def lock_one(self, table: str, **criteria: Any) -> Record | None:
        # The store lock already serialises whole transactions
        return self.find_one(table, **criteria)

    def find_all(
        self, table: str, order_by: Sequence[str] = ("id",), **criteria: Any
    ) -> list[Record]:
        rows = [dict(row) for row in self._matching(table, criteria)]
        # Stable sorts applied from the least significant key
        for column in reversed(order_by):
            descending = column.startswith("-")
            rows.sort(key=_sort_key(column.lstrip("-")), reverse=descending)
        return rows

    def insert(self, table: str, values: Mapping[str, Any]) -> Record:
        self._begin_write()
        spec = self._spec(table)
        self._store.sequences[table] += 1
        row = {"id": self._store.sequences[table], **spec.columns}
        if spec.timestamps:
            now = _now()
            row["created_at"] = now
            row["updated_at"] = now
        row.update({column: _adapt(value) for column, value in values.items()})

        self._check_row(table, row)
        self._rows(table)[row["id"]] = row
        return dict(row)

    def update(self, table: str, record_id: int, values: Mapping[str, Any]) -> Record:
        self._begin_write()
        rows = self._rows(table)
        row = {**rows[record_id], **{column: _adapt(value) for column, value in values.items()}}
        self._check_row(table, row)
        rows[record_id] = row
        return dict(row)

    def delete(self, table: str, record_id: int) -> None:
        if record_id not in self._rows(table):
            return
        self._begin_write()
        for child_table, spec in SCHEMA.items():
            for fk in spec.foreign_keys:
                if fk.references != table:
                    continue
                children = [row for row in self._rows(child_table).values() if row.get(fk.column) == record_id]
                if not children:
                    continue
                if fk.on_delete == RESTRICT:
                    logger.info("Delete restricted: %s.%s references %s", child_table, fk.column, table)
                    raise Conflict(REFERENCE_CONFLICT)
                for child in children:
                    if fk.on_delete == CASCADE:
                        self.delete(child_table, child["id"])
                    else:
                        child[fk.column] = None
        self._rows(table).pop(record_id, None)

    def _begin_write(self) -> None:
        if self.snapshot is None:
            self.snapshot = copy.deepcopy((self._store.tables, self._store.sequences))

    def _check_row(self, table: str, row: Record) -> None:
        spec = self._spec(table)
        for name, holds in spec.checks.items():
            if not holds(row):
                logger.warning("Check violation: %s.%s", table, name)
                raise Conflict(STATE_CONFLICT)
        for columns in spec.unique:
            key = tuple(row.get(column) for column in columns)
            if any(value is None for value in key):
                continue
            for other in self._rows(table).values():
                if other["id"] != row["id"] and tuple(other.get(column) for column in columns) == key:
                    logger.info("Unique violation: %s(%s)", table, ", ".join(columns))
                    raise Conflict(UNIQUE_CONFLICT)
        for fk in spec.foreign_keys:
            value = row.get(fk.column)
            if value is not None and value not in self._rows(fk.references):
                logger.info("Foreign key violation: %s.%s", table, fk.column)
                raise Conflict(REFERENCE_CONFLICT)

    def _matching(self, table: str, criteria: Mapping[str, Any]) -> Iterator[Record]:
        wanted = {column: _adapt(value) for column, value in criteria.items()}
        for record_id in sorted(self._rows(table)):
            row = self._rows(table)[record_id]
            if all(row.get(column) == value for column, value in wanted.items()):
                yield row

    def _rows(self, table: str) -> dict[int, Record]:
        return self._store.tables[table]

    def _spec(self, table: str) -> TableSpec:
        return SCHEMA[table]


class MemoryRecordStore:
    """
    Implements RecordStore protocol with process-local dicts.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[int, Record]] = {name: {} for name in SCHEMA}
        self.sequences: dict[str, int] = {name: 0 for name in SCHEMA}
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[MemoryRecordSession]:
        """Serialise the block and roll back to a snapshot on error."""
        with self._lock:
            session = MemoryRecordSession(self)
            try:
                yield session
            except BaseException:
                if session.snapshot is not None:
                    self.tables, self.sequences = session.snapshot
                raise

    def ping(self) -> None:
        return None
