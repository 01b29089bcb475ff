"""
JWT token signer adapter - Implements TokenSigner protocol.

Signs session claims with python-jose (HMAC, HS256 by default) and adds
``iat``/``exp`` claims from the configured lifetime.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JoseTokenSigner:
    """
    Implements TokenSigner protocol via python-jose.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = timedelta(minutes=expire_minutes)
        self._clock = clock

    def sign(self, claims: Mapping[str, Any]) -> str:
        issued_at = self._clock()
        payload = dict(claims)
        payload["iat"] = int(issued_at.timestamp())
        payload["exp"] = int((issued_at + self._lifetime).timestamp())
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any] | None:
        """Return the claims of a valid, unexpired token, or None."""
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            logger.info("Rejected session token: %s", e)
            return None
