"""
Unit tests for ConsoleEmailSender adapter.

Tests verify the console email sender implements EmailSender protocol
and logs activation links in the correct format.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.adapters.smtp.console import ConsoleEmailSender
from src.domain.ports import EmailSender

LINK = "http://localhost:3001/activate?token=abc123"


class TestConsoleEmailSenderProtocol:
    """Tests for EmailSender protocol compliance."""

    def test_implements_email_sender_protocol(self) -> None:
        """ConsoleEmailSender satisfies EmailSender structurally."""
        sender = ConsoleEmailSender()

        def accepts_email_sender(s: EmailSender) -> None:
            pass

        accepts_email_sender(sender)
        assert callable(sender.send_activation_email)

    def test_no_explicit_inheritance(self) -> None:
        """ConsoleEmailSender uses structural subtyping, not inheritance."""
        bases = ConsoleEmailSender.__bases__
        assert bases == (object,), f"Expected only object as base, got {bases}"


class TestSendActivationEmail:
    """Tests for send_activation_email method."""

    def test_logs_one_info_record(self, caplog: pytest.LogCaptureFixture) -> None:
        sender = ConsoleEmailSender()

        with caplog.at_level(logging.INFO):
            sender.send_activation_email("juan@x.pe", "Juan Pérez", LINK)

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO

    def test_log_format(self, caplog: pytest.LogCaptureFixture) -> None:
        """Log format: [ACTIVATION] Email: ... Name: ... Link: ..."""
        sender = ConsoleEmailSender()

        with caplog.at_level(logging.INFO):
            sender.send_activation_email("juan@x.pe", "Juan Pérez", LINK)

        assert "[ACTIVATION]" in caplog.text
        assert "Email: juan@x.pe" in caplog.text
        assert "Name: Juan Pérez" in caplog.text
        assert f"Link: {LINK}" in caplog.text

    def test_returns_none(self) -> None:
        assert ConsoleEmailSender().send_activation_email("juan@x.pe", "Juan", LINK) is None


class TestThreadSafety:
    """Tests for thread-safe logging."""

    def test_concurrent_calls_all_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Concurrent deliveries each produce one complete record."""
        sender = ConsoleEmailSender()

        with caplog.at_level(logging.INFO), ThreadPoolExecutor(max_workers=5) as executor:
            futures = [
                executor.submit(sender.send_activation_email, f"user{i}@x.pe", f"User {i}", f"{LINK}{i}")
                for i in range(10)
            ]
            for f in futures:
                f.result()

        assert len(caplog.records) == 10
        for record in caplog.records:
            assert "[ACTIVATION]" in record.message
            assert "Link:" in record.message
