"""
Adversarial tests for race condition attack prevention.

Verifies that concurrent check-then-write sequences cannot break the
uniqueness invariants:
- At most one voter profile per document number
- At most one email binding per pre-registered voter
- At most one successful redemption per activation token

The application pre-checks give friendly errors; the database unique
constraints are the authoritative backstop, translated into Conflict.
"""

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

import pytest

from src.adapters.repository.postgres import PostgresRecordStore
from src.domain.accounts import AccountLifecycle
from src.domain.exceptions import BadRequest, Conflict, ServiceError
from src.domain.notifications import ActivationNotifier
from src.domain.voting import VoteIntentionService
from tests.support import token_from

# Apply adversarial marker to all tests in this module
pytestmark = pytest.mark.adversarial


def make_lifecycle(pg_store: PostgresRecordStore, email_sender: Mock | None = None) -> AccountLifecycle:
    notifier = ActivationNotifier(email_sender=email_sender or Mock(), frontend_url="http://localhost:3001")
    return AccountLifecycle(store=pg_store, notifier=notifier, bcrypt_cost=4)


def race(attempts: int, attack: Callable[[int], object]) -> list[object]:
    """Run attack(i) concurrently; collect results or raised ServiceErrors."""
    results: list[object] = []
    results_lock = threading.Lock()
    barrier = threading.Barrier(attempts)

    def run(i: int) -> None:
        barrier.wait()
        try:
            outcome = attack(i)
        except ServiceError as e:
            outcome = e
        with results_lock:
            results.append(outcome)

    with ThreadPoolExecutor(max_workers=attempts) as executor:
        futures = [executor.submit(run, i) for i in range(attempts)]
        for f in futures:
            f.result()
    return results


class TestRaceConditionAttacks:
    """
    Adversarial tests simulating concurrent duplicate submissions.
    """

    def test_concurrent_pre_register_exactly_one_succeeds(self, pg_store: PostgresRecordStore) -> None:
        """
        Many simultaneous pre-registrations for one document number.

        Expected defense: exactly one voter profile is committed, the rest
        fail with Conflict and leave no orphan accounts behind.
        """
        lifecycle = make_lifecycle(pg_store)
        num_attackers = 8

        results = race(num_attackers, lambda i: lifecycle.pre_register(f"Atacante {i}", "12345678"))

        successes = [r for r in results if not isinstance(r, ServiceError)]
        assert len(successes) == 1, f"{len(successes)} profiles created for the same document"
        assert all(isinstance(r, Conflict) for r in results if isinstance(r, ServiceError))

        with pg_store.transaction() as session:
            assert len(session.find_all("voters", document_number="12345678")) == 1
            assert len(session.find_all("users")) == 1

    def test_concurrent_register_email_binds_once(self, pg_store: PostgresRecordStore) -> None:
        """Simultaneous email bindings for one voter: one wins."""
        lifecycle = make_lifecycle(pg_store)
        lifecycle.pre_register("Juan Pérez", "12345678")

        results = race(5, lambda i: lifecycle.register_email("12345678", f"juan{i}@x.pe"))

        successes = [r for r in results if not isinstance(r, ServiceError)]
        assert len(successes) == 1
        with pg_store.transaction() as session:
            account = session.find_one("users", name="Juan Pérez")
        assert account["email"] == successes[0]["email"]

    def test_concurrent_activation_redeems_once(self, pg_store: PostgresRecordStore) -> None:
        """The same token submitted concurrently activates the account once."""
        email_sender = Mock()
        lifecycle = make_lifecycle(pg_store, email_sender)
        lifecycle.pre_register("Juan Pérez", "12345678")
        lifecycle.register_email("12345678", "juan@x.pe")
        token = token_from(email_sender)

        results = race(5, lambda i: lifecycle.activate_account(token, f"Secret{i}23"))

        successes = [r for r in results if not isinstance(r, ServiceError)]
        assert len(successes) == 1
        assert all(isinstance(r, BadRequest) for r in results if isinstance(r, ServiceError))

    def test_concurrent_vote_intentions_one_per_triple(self, pg_store: PostgresRecordStore) -> None:
        """Duplicate vote intentions race into a single row."""
        with pg_store.transaction() as session:
            user = session.insert("users", {"name": "Ana"})
            group = session.insert("political_groups", {"name": "Partido"})
            candidate = session.insert(
                "candidates", {"full_name": "C", "office": "PRESIDENT", "political_group_id": group["id"]}
            )
            election = session.insert(
                "elections", {"name": "EG", "type": "GENERAL", "date": "2026-04-12T00:00:00+00:00"}
            )
        triple = {"user_id": user["id"], "candidate_id": candidate["id"], "election_id": election["id"]}
        service = VoteIntentionService(pg_store)

        results = race(6, lambda i: service.create(triple))

        assert sum(not isinstance(r, ServiceError) for r in results) == 1
        with pg_store.transaction() as session:
            assert len(session.find_all("vote_intentions")) == 1
