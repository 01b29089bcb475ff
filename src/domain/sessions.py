"""
Session issuer - credential verification and bearer token minting.

Every rejection (unknown email, inactive account, missing password,
wrong password) raises the same Unauthorized message so responses do not
reveal which accounts exist. bcrypt always runs, against a dummy digest
when the account has none, to keep response timing uniform.
"""

import logging
from dataclasses import dataclass
from typing import Any

from .credentials import normalize_email, verify_password
from .exceptions import Unauthorized
from .ports import Record, RecordStore, TokenSigner
from .projections import public_account

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credenciales inválidas"
INVALID_SESSION = "Sesión inválida o expirada"


@dataclass
class SessionService:
    """Authenticates accounts and resolves bearer tokens."""

    store: RecordStore
    signer: TokenSigner

    def login(self, email: str, password: str) -> dict[str, Any]:
        """
        Verify credentials and issue a session token.

        Returns:
            {"access_token", "token_type", "account"} with the public
            account projection

        Raises:
            Unauthorized: for every kind of credential failure
        """
        normalized_email = normalize_email(email)
        with self.store.transaction() as session:
            account = session.find_one("users", email=normalized_email)

        password_hash = account["password_hash"] if account is not None else None
        password_valid = verify_password(password, password_hash)

        reason = None
        if account is None:
            reason = "unknown email"
        elif not account["is_active"]:
            reason = "account not active"
        elif password_hash is None:
            reason = "no password set"
        elif not password_valid:
            reason = "wrong password"
        if reason is not None:
            logger.warning("Login rejected for %s: %s", normalized_email, reason)
            raise Unauthorized(INVALID_CREDENTIALS)

        claims = {"sub": str(account["id"]), "email": account["email"], "role": account["role"]}
        logger.info("Session issued for account %s", account["id"])
        return {
            "access_token": self.signer.sign(claims),
            "token_type": "bearer",
            "account": public_account(account),
        }

    def current_account(self, token: str) -> Record:
        """Resolve a bearer token to its active account."""
        claims = self.signer.verify(token)
        if claims is None:
            raise Unauthorized(INVALID_SESSION)
        try:
            account_id = int(claims["sub"])
        except (KeyError, TypeError, ValueError):
            raise Unauthorized(INVALID_SESSION) from None

        with self.store.transaction() as session:
            account = session.get("users", account_id)
        if account is None or not account["is_active"]:
            raise Unauthorized(INVALID_SESSION)
        return public_account(account)
