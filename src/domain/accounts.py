"""
Account services - lifecycle and administration.

Account Lifecycle (forward-only)
================================

States (derived from the account row, see projections.account_state):
- PRE_REGISTERED: no email, no password, inactive. Created together with a
  voter profile so a citizen known by document number can claim it later.
- PENDING_ACTIVATION: email bound and an activation token issued.
- ACTIVE: password set, token cleared. Terminal for this lifecycle.

Transitions:
    PRE_REGISTERED     -> PENDING_ACTIVATION  (register_email)
    PENDING_ACTIVATION -> PENDING_ACTIVATION  (resend_activation_token,
                                               previous token invalidated)
    PENDING_ACTIVATION -> ACTIVE              (activate_account)

Accounts created by an administrator with email and password start ACTIVE.

Only one activation token is valid per account at a time. Tokens expire
after the configured TTL (24 hours by default) and are redeemable once.
Email delivery is best effort and never affects token validity.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from .credentials import generate_activation_token, hash_password, normalize_email, utc_now
from .entities import EntityService
from .exceptions import BadRequest, Conflict, NotFound
from .integrity import IntegrityValidator
from .notifications import ActivationNotifier
from .ports import Record, RecordSession, RecordStore, UserRole
from .projections import public_account
from .voting import DOCUMENT_TAKEN, TABLE_NOT_FOUND, expand_voter

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "El correo ya está registrado"


@dataclass
class AccountService(EntityService):
    """Administrative CRUD over accounts. Responses never carry credentials."""

    table = "users"
    not_found_message = "Usuario no encontrado"

    bcrypt_cost: int = 10

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        if values.get("email"):
            values["email"] = normalize_email(values["email"])
            checks.ensure_unique(self.table, EMAIL_TAKEN, email=values["email"])
        else:
            values["email"] = None

        password = values.pop("password", None)
        if password:
            values["password_hash"] = hash_password(password, self.bcrypt_cost)
            values["is_active"] = True
        else:
            values["is_active"] = False
        if values.get("role") is None:
            values["role"] = UserRole.VOTER.value

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if changes.get("email"):
            changes["email"] = normalize_email(changes["email"])
            checks.ensure_unique(self.table, EMAIL_TAKEN, exclude_id=existing["id"], email=changes["email"])
        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = hash_password(password, self.bcrypt_cost)
        return {key: value for key, value in changes.items() if value is not None}

    def expand(self, session: RecordSession, record: Record) -> Record:
        return public_account(record)


@dataclass
class AccountLifecycle:
    """
    Domain service for pre-registration and account activation.

    Orchestrates the lifecycle transitions, token issuance and expiry,
    password hashing and activation email hand-off.
    """

    store: RecordStore
    notifier: ActivationNotifier
    token_ttl: timedelta = timedelta(hours=24)
    token_bytes: int = 32
    bcrypt_cost: int = 10
    clock: Callable[[], datetime] = field(default=utc_now)

    def pre_register(self, name: str, document_number: str, voting_table_id: int | None = None) -> Record:
        """
        Create a placeholder account and its voter profile.

        Raises:
            Conflict: document number already belongs to a voter
            NotFound: voting_table_id given but unknown
        """
        with self.store.transaction() as session:
            checks = IntegrityValidator(session)
            checks.ensure_unique("voters", DOCUMENT_TAKEN, document_number=document_number)
            checks.require_if_set("voting_tables", voting_table_id, TABLE_NOT_FOUND)

            account = session.insert(
                "users",
                {"name": name, "role": UserRole.VOTER.value, "is_active": False},
            )
            voter = session.insert(
                "voters",
                {
                    "user_id": account["id"],
                    "document_number": document_number,
                    "voting_table_id": voting_table_id,
                },
            )
            logger.info("Pre-registered voter %s (account %s)", voter["id"], account["id"])
            return self._with_account_status(expand_voter(session, voter), account)

    def register_email(self, document_number: str, email: str) -> dict[str, str]:
        """
        Bind an email to a pre-registered voter and issue an activation token.

        Raises:
            NotFound: no voter holds document_number
            Conflict: the voter already has an email or an active account,
                or email is taken
        """
        email = normalize_email(email)
        with self.store.transaction() as session:
            voter = session.find_one("voters", document_number=document_number)
            if voter is None:
                raise NotFound("No se encontró un votante con ese número de documento")
            account = session.lock_one("users", id=voter["user_id"])
            if account["email"]:
                raise Conflict("Este votante ya tiene un correo electrónico registrado")
            if account["is_active"]:
                raise Conflict("La cuenta de este votante ya está activada")
            IntegrityValidator(session).ensure_unique(
                "users", "Este correo electrónico ya está registrado", email=email
            )

            token, expiry = self._new_token()
            session.update(
                "users",
                account["id"],
                {
                    "email": email,
                    "activation_token": token,
                    "activation_token_expiry": expiry,
                    "updated_at": self.clock(),
                },
            )
        logger.info("Email bound to account %s, activation pending", account["id"])
        self.notifier.notify(email, account["name"], token)
        return {"email": email}

    def activate_account(self, token: str, password: str) -> Record:
        """
        Redeem an activation token and set the account password.

        Raises:
            BadRequest: unknown token, expired token or account already active
        """
        with self.store.transaction() as session:
            account = session.lock_one("users", activation_token=token)
            if account is None:
                raise BadRequest("Token de activación inválido")
            expiry = account["activation_token_expiry"]
            if expiry is None or expiry < self.clock():
                raise BadRequest("El token de activación ha expirado")
            if account["is_active"]:
                raise BadRequest("Esta cuenta ya ha sido activada")

            activated = session.update(
                "users",
                account["id"],
                {
                    "password_hash": hash_password(password, self.bcrypt_cost),
                    "is_active": True,
                    "activation_token": None,
                    "activation_token_expiry": None,
                    "updated_at": self.clock(),
                },
            )
        logger.info("Account %s activated", activated["id"])
        return public_account(activated)

    def resend_activation_token(self, email: str) -> dict[str, str]:
        """
        Replace the activation token of a pending account and resend it.

        Raises:
            NotFound: no account with that email
            BadRequest: account already active
        """
        email = normalize_email(email)
        with self.store.transaction() as session:
            account = session.lock_one("users", email=email)
            if account is None:
                raise NotFound("No se encontró un usuario con ese correo electrónico")
            if account["is_active"]:
                raise BadRequest("Esta cuenta ya está activada")

            token, expiry = self._new_token()
            session.update(
                "users",
                account["id"],
                {"activation_token": token, "activation_token_expiry": expiry, "updated_at": self.clock()},
            )
        logger.info("Activation token reissued for account %s", account["id"])
        self.notifier.notify(email, account["name"], token)
        return {"email": email}

    def _new_token(self) -> tuple[str, datetime]:
        return generate_activation_token(self.token_bytes), self.clock() + self.token_ttl

    @staticmethod
    def _with_account_status(voter: Record, account: Mapping[str, Any]) -> Record:
        voter["user"] = {**voter["user"], "is_active": account["is_active"]}
        return voter
