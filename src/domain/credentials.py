"""
Credential helpers - password hashing, token generation, normalisation.

bcrypt is used for password digests (cost factor >= 10) and the secrets
module for activation tokens.
"""

import secrets
from datetime import datetime, timezone

import bcrypt

# Pre-computed bcrypt hash for timing oracle prevention.
# Compared against when an account has no digest so bcrypt always runs.
DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10)).decode()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Check a password against a stored digest in constant time.

    A missing digest is compared against DUMMY_BCRYPT_HASH so the call
    costs the same whether or not the account has a password.
    """
    digest = password_hash or DUMMY_BCRYPT_HASH
    matched = bcrypt.checkpw(password.encode(), digest.encode())
    return matched and password_hash is not None


def generate_activation_token(nbytes: int = 32) -> str:
    """Generate an unguessable hex activation token."""
    return secrets.token_hex(nbytes)
