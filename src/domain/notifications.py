"""
Activation notifier - best-effort delivery of activation links.

Delivery is detached from the operation that issued the token: when an
executor is configured the send runs on it and the caller never waits.
Failures are logged and never raised, so a token stays valid whatever
happens to the email.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from urllib.parse import urlencode

from .ports import EmailSender

logger = logging.getLogger(__name__)


@dataclass
class ActivationNotifier:
    """Builds activation links and hands them to the email sender."""

    email_sender: EmailSender
    frontend_url: str
    executor: Executor | None = None

    def activation_url(self, token: str) -> str:
        return f"{self.frontend_url.rstrip('/')}/activate?{urlencode({'token': token})}"

    def notify(self, email: str, name: str, token: str) -> None:
        """Schedule delivery of the activation email. Never raises."""
        url = self.activation_url(token)
        if self.executor is None:
            self._deliver(email, name, url)
            return
        try:
            self.executor.submit(self._deliver, email, name, url)
        except RuntimeError:
            # Executor already shut down
            logger.exception("Could not schedule activation email to %s", email)

    def _deliver(self, email: str, name: str, url: str) -> None:
        try:
            self.email_sender.send_activation_email(email, name, url)
        except Exception:
            logger.exception("Activation email to %s failed", email)
        else:
            logger.info("Activation email sent to %s", email)
