"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging activation links for development use.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints activation links to stdout.
    """

    def send_activation_email(self, email: str, name: str, activation_url: str) -> None:
        """
        Log the activation link (simulates email delivery).

        The link is logged at INFO level to be visible in container logs.

        Args:
            email: Recipient email address
            name: Recipient display name
            activation_url: Link embedding the activation token
        """
        logger.info("[ACTIVATION] Email: %s Name: %s Link: %s", email, name, activation_url)
