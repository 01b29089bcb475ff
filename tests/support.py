"""Helpers shared by test modules."""

from datetime import datetime, timezone
from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse


class FakeClock:
    """Settable clock for expiry tests."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


def token_from(email_sender: Mock) -> str:
    """Extract the activation token from the last email sent."""
    activation_url = email_sender.send_activation_email.call_args[0][2]
    return parse_qs(urlparse(activation_url).query)["token"][0]
