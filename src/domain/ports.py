"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the enums shared across the domain and the interfaces
(ports) that the domain requires from infrastructure. Adapters implement
these protocols through structural subtyping.
"""

from collections.abc import Mapping, Sequence
from contextlib import AbstractContextManager
from enum import Enum
from typing import Any, Protocol

Record = dict[str, Any]


class UserRole(str, Enum):
    """Account roles."""

    VOTER = "VOTER"
    TABLE_MEMBER = "TABLE_MEMBER"
    CANDIDATE = "CANDIDATE"
    ADMIN = "ADMIN"


class AccountState(str, Enum):
    """
    Account activation lifecycle.

    State Transitions (forward-only):
    - PRE_REGISTERED -> PENDING_ACTIVATION (email bound, token issued)
    - PENDING_ACTIVATION -> PENDING_ACTIVATION (token reissued)
    - PENDING_ACTIVATION -> ACTIVE (token redeemed with a new password)

    Accounts created with email and password start ACTIVE.
    """

    PRE_REGISTERED = "PRE_REGISTERED"
    PENDING_ACTIVATION = "PENDING_ACTIVATION"
    ACTIVE = "ACTIVE"


class ModerationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PostStatus(str, Enum):
    PUBLISHED = "PUBLISHED"
    DRAFT = "DRAFT"
    HIDDEN = "HIDDEN"


class CandidateOffice(str, Enum):
    PRESIDENT = "PRESIDENT"
    VICE_PRESIDENT = "VICE_PRESIDENT"
    CONGRESS = "CONGRESS"
    SENATE = "SENATE"
    ANDEAN_PARLIAMENT = "ANDEAN_PARLIAMENT"


class ElectionType(str, Enum):
    GENERAL = "GENERAL"
    REGIONAL = "REGIONAL"
    MUNICIPAL = "MUNICIPAL"
    REFERENDUM = "REFERENDUM"


class ElectoralEventCategory(str, Enum):
    DEADLINE = "DEADLINE"
    ELECTION_DAY = "ELECTION_DAY"
    DEBATE = "DEBATE"
    CAMPAIGN = "CAMPAIGN"
    OTHER = "OTHER"


class GovernmentPlanSector(str, Enum):
    HEALTH = "HEALTH"
    EDUCATION = "EDUCATION"
    ECONOMY = "ECONOMY"
    SECURITY = "SECURITY"
    ENVIRONMENT = "ENVIRONMENT"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    OTHER = "OTHER"


class GuideCategory(str, Enum):
    ELECTOR_LOCATION = "ELECTOR_LOCATION"
    VOTING_PROCESS = "VOTING_PROCESS"
    TABLE_MEMBER_DUTIES_VOTING = "TABLE_MEMBER_DUTIES_VOTING"
    OTHER = "OTHER"


class RecordSession(Protocol):
    """
    Port interface for record access inside one transaction.

    Records are plain dicts keyed by column name. Unique and foreign key
    violations raised by the underlying store surface as Conflict.
    """

    def get(self, table: str, record_id: int) -> Record | None:
        """Fetch one record by primary key, or None."""
        ...

    def find_one(self, table: str, **criteria: Any) -> Record | None:
        """Fetch the first record whose columns equal every criterion."""
        ...

    def lock_one(self, table: str, **criteria: Any) -> Record | None:
        """
        Like find_one, but lock the matched row until the transaction ends.

        A concurrent transaction that changed the row first is waited for,
        and the criteria are evaluated against its committed version.
        """
        ...

    def find_all(
        self, table: str, order_by: Sequence[str] = ("id",), **criteria: Any
    ) -> list[Record]:
        """
        Fetch all records matching the criteria.

        Args:
            table: Table name
            order_by: Column names, prefixed with "-" for descending order
            criteria: Column equality filters
        """
        ...

    def insert(self, table: str, values: Mapping[str, Any]) -> Record:
        """Insert a record and return it with generated columns filled in."""
        ...

    def update(self, table: str, record_id: int, values: Mapping[str, Any]) -> Record:
        """Update the given columns of one record and return the new row."""
        ...

    def delete(self, table: str, record_id: int) -> None:
        """Delete one record by primary key."""
        ...


class RecordStore(Protocol):
    """Port interface for the transactional relational store."""

    def transaction(self) -> AbstractContextManager[RecordSession]:
        """
        Open a unit of work.

        Commits when the block exits normally, rolls back when it raises.
        """
        ...

    def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_activation_email(self, email: str, name: str, activation_url: str) -> None:
        """
        Send the account activation email.

        Args:
            email: Recipient email address
            name: Recipient display name
            activation_url: Link embedding the activation token
        """
        ...


class TokenSigner(Protocol):
    """Port interface for signed session tokens."""

    def sign(self, claims: Mapping[str, Any]) -> str:
        """Return a signed token carrying the claims and an expiry."""
        ...

    def verify(self, token: str) -> dict[str, Any] | None:
        """Return the claims of a valid token, or None."""
        ...
