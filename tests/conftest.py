"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory record stores
- Domain services wired with mock email senders
- Test client setup against the real application
"""

from collections.abc import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from src.adapters.repository.memory import MemoryRecordStore
from src.api.dependencies import get_email_sender
from src.api.main import app
from src.domain.accounts import AccountLifecycle
from src.domain.notifications import ActivationNotifier
from tests.support import FakeClock

FRONTEND_URL = "http://localhost:3001"


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def email_sender() -> Mock:
    return Mock()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def lifecycle(store: MemoryRecordStore, email_sender: Mock, clock: FakeClock) -> AccountLifecycle:
    """Lifecycle with inline email delivery and a controllable clock."""
    notifier = ActivationNotifier(email_sender=email_sender, frontend_url=FRONTEND_URL)
    return AccountLifecycle(store=store, notifier=notifier, bcrypt_cost=4, clock=clock)


@pytest.fixture
def client(email_sender: Mock) -> Generator[TestClient, None, None]:
    """
    Test client over the real application with a fresh in-memory store.

    The lifespan is not entered, so no mail thread pool exists and
    activation emails are delivered inline to the mock sender.
    """
    app.state.store = MemoryRecordStore()
    app.state.mail_executor = None
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        app.state.store = None
