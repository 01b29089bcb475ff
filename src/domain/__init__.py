"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account lifecycle, session issuance, the
referential integrity validator and one service per electoral entity.
It defines its own port interfaces for infrastructure abstraction,
ensuring true hexagonal architecture decoupling.
"""

from .accounts import AccountLifecycle, AccountService
from .exceptions import BadRequest, Conflict, NotFound, ServiceError, Unauthorized
from .integrity import IntegrityValidator
from .notifications import ActivationNotifier
from .ports import AccountState, EmailSender, RecordSession, RecordStore, TokenSigner, UserRole
from .sessions import SessionService

__all__ = [
    "AccountLifecycle",
    "AccountService",
    "AccountState",
    "ActivationNotifier",
    "BadRequest",
    "Conflict",
    "EmailSender",
    "IntegrityValidator",
    "NotFound",
    "RecordSession",
    "RecordStore",
    "ServiceError",
    "SessionService",
    "TokenSigner",
    "Unauthorized",
    "UserRole",
]
