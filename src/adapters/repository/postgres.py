"""
PostgreSQL record store adapter - Implements the RecordStore protocol.

This module provides the PostgreSQL implementation of the domain's
record store port using psycopg3 with raw SQL. Statements are composed
with psycopg.sql so table and column names are always quoted
identifiers and every value is a bound parameter.

Each transaction() call borrows one pooled connection and wraps the
domain's check-then-write sequence in a single database transaction.
Unique and foreign key violations raised by PostgreSQL are translated
into the domain's Conflict, so a lost race surfaces exactly like the
friendly pre-check would have.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.exceptions import BadRequest, Conflict
from src.domain.ports import Record

from .constraints import MISSING_VALUE, REFERENCE_CONFLICT, STATE_CONFLICT, UNIQUE_CONFLICT

logger = logging.getLogger(__name__)


def _adapt(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class PostgresRecordSession:
    """
    Implements RecordSession protocol over one open connection.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, conn: psycopg.Connection) -> None:
        self._conn = conn

    def get(self, table: str, record_id: int) -> Record | None:
        return self.find_one(table, id=record_id)

    def find_one(self, table: str, **criteria: Any) -> Record | None:
        return self._first(table, criteria)

    def lock_one(self, table: str, **criteria: Any) -> Record | None:
        return self._first(table, criteria, sql.SQL(" FOR UPDATE"))

    def find_all(
        self, table: str, order_by: Sequence[str] = ("id",), **criteria: Any
    ) -> list[Record]:
        where, params = self._where(criteria)
        query = sql.SQL("SELECT * FROM {table}{where}{order}").format(
            table=sql.Identifier(table), where=where, order=self._order(order_by)
        )
        with self._conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, params)
            return cursor.fetchall()

    def insert(self, table: str, values: Mapping[str, Any]) -> Record:
        columns = list(values)
        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values}) RETURNING *").format(
            table=sql.Identifier(table),
            columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
            values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )
        return self._write(query, [_adapt(values[column]) for column in columns])

    def update(self, table: str, record_id: int, values: Mapping[str, Any]) -> Record:
        if not values:
            return self.get(table, record_id)
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in values
        )
        query = sql.SQL("UPDATE {table} SET {assignments} WHERE id = %s RETURNING *").format(
            table=sql.Identifier(table), assignments=assignments
        )
        return self._write(query, [*map(_adapt, values.values()), record_id])

    def delete(self, table: str, record_id: int) -> None:
        query = sql.SQL("DELETE FROM {table} WHERE id = %s").format(table=sql.Identifier(table))
        self._write(query, [record_id], returning=False)

    def _first(
        self, table: str, criteria: Mapping[str, Any], suffix: sql.Composable = sql.SQL("")
    ) -> Record | None:
        where, params = self._where(criteria)
        query = sql.SQL("SELECT * FROM {table}{where} LIMIT 1{suffix}").format(
            table=sql.Identifier(table), where=where, suffix=suffix
        )
        with self._conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, params)
            return cursor.fetchone()

    def _write(self, query: sql.Composed, params: list[Any], returning: bool = True) -> Record | None:
        """
        Execute a mutating statement, translating constraint violations.

        The Conflict propagating out of transaction() rolls back the whole
        unit of work.
        """
        try:
            with self._conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(query, params)
                return cursor.fetchone() if returning else None
        except psycopg.errors.UniqueViolation as e:
            logger.info("Unique violation: %s", e.diag.constraint_name)
            raise Conflict(UNIQUE_CONFLICT) from e
        except psycopg.errors.ForeignKeyViolation as e:
            logger.info("Foreign key violation: %s", e.diag.constraint_name)
            raise Conflict(REFERENCE_CONFLICT) from e
        except psycopg.errors.CheckViolation as e:
            logger.warning("Check violation: %s", e.diag.constraint_name)
            raise Conflict(STATE_CONFLICT) from e
        except psycopg.errors.NotNullViolation as e:
            logger.warning("Not null violation: %s.%s", e.diag.table_name, e.diag.column_name)
            raise BadRequest(MISSING_VALUE) from e

    @staticmethod
    def _where(criteria: Mapping[str, Any]) -> tuple[sql.Composable, list[Any]]:
        if not criteria:
            return sql.SQL(""), []
        clauses = []
        params = []
        for column, value in criteria.items():
            if value is None:
                clauses.append(sql.SQL("{} IS NULL").format(sql.Identifier(column)))
            else:
                clauses.append(sql.SQL("{} = %s").format(sql.Identifier(column)))
                params.append(_adapt(value))
        return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params

    @staticmethod
    def _order(order_by: Sequence[str]) -> sql.Composable:
        if not order_by:
            return sql.SQL("")
        terms = []
        for column in order_by:
            if column.startswith("-"):
                terms.append(sql.SQL("{} DESC").format(sql.Identifier(column[1:])))
            else:
                terms.append(sql.SQL("{} ASC").format(sql.Identifier(column)))
        return sql.SQL(" ORDER BY ") + sql.SQL(", ").join(terms)


class PostgresRecordStore:
    """
    Implements RecordStore protocol via psycopg3 connection pool.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def transaction(self) -> Iterator[PostgresRecordSession]:
        """Borrow a connection and run the block inside one transaction."""
        with self._pool.connection() as conn, conn.transaction():
            yield PostgresRecordSession(conn)

    def ping(self) -> None:
        with self._pool.connection() as conn:
            conn.execute("SELECT 1")


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
