"""Read projections shared by services."""

from collections.abc import Iterable
from typing import Any

from .ports import AccountState, Record

# Never leave the domain
PRIVATE_ACCOUNT_FIELDS = frozenset({"password_hash", "activation_token", "activation_token_expiry"})


def pick(record: Record | None, fields: Iterable[str]) -> dict[str, Any] | None:
    if record is None:
        return None
    return {field: record.get(field) for field in fields}


def public_account(record: Record) -> dict[str, Any]:
    """Account without credential or token material."""
    return {key: value for key, value in record.items() if key not in PRIVATE_ACCOUNT_FIELDS}


def account_summary(record: Record | None) -> dict[str, Any] | None:
    return pick(record, ("id", "name", "email", "role"))


def account_state(record: Record) -> AccountState:
    """Derive the activation lifecycle state of an account row."""
    if record.get("is_active"):
        return AccountState.ACTIVE
    if record.get("email") is None and record.get("password_hash") is None:
        return AccountState.PRE_REGISTERED
    return AccountState.PENDING_ACTIVATION
