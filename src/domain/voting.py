"""
Voting services - centers, tables, voters, table members, vote intentions.

Uniqueness invariants enforced here:
- one voter profile per account, one per document number
- one table member profile per account
- one voting table per code
- one vote intention per (account, election, candidate) triple
"""

import logging
from dataclasses import dataclass
from typing import Any

from .entities import EntityService
from .integrity import IntegrityValidator
from .ports import Record, RecordSession, UserRole
from .projections import account_summary, pick

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "Usuario no encontrado"
TABLE_NOT_FOUND = "La mesa de votación especificada no existe"
CENTER_NOT_FOUND = "Local de votación no encontrado"
DOCUMENT_TAKEN = "El documento de identidad ya está registrado en otro votante"


def expand_voting_table(session: RecordSession, table_id: int | None) -> Record | None:
    """Voting table with its voting center embedded."""
    table = session.get("voting_tables", table_id) if table_id is not None else None
    if table is None:
        return None
    return {**table, "voting_center": session.get("voting_centers", table["voting_center_id"])}


def expand_voter(session: RecordSession, voter: Record) -> Record:
    return {
        **voter,
        "user": account_summary(session.get("users", voter["user_id"])),
        "voting_table": expand_voting_table(session, voter.get("voting_table_id")),
    }


def promote_role_if_needed(session: RecordSession, account: Record, role: UserRole) -> Record:
    """
    Give an account the role its new profile implies.

    Returns the account row, updated when the role changed.
    """
    if account["role"] == role.value:
        return account
    logger.info("Promoting account %s from %s to %s", account["id"], account["role"], role.value)
    return session.update("users", account["id"], {"role": role.value})


@dataclass
class VotingCenterService(EntityService):
    table = "voting_centers"
    not_found_message = "Local de votación no encontrado"
    order_by = ("name",)

    def expand(self, session: RecordSession, record: Record) -> Record:
        tables = session.find_all("voting_tables", order_by=("code",), voting_center_id=record["id"])
        return {**record, "voting_tables": tables}


@dataclass
class VotingTableService(EntityService):
    table = "voting_tables"
    not_found_message = "Mesa de votación no encontrada"
    order_by = ("voting_center_id", "code")

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.ensure_unique(self.table, "Ya existe una mesa con ese código", code=values["code"])
        checks.require("voting_centers", values["voting_center_id"], CENTER_NOT_FOUND)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if changes.get("code") is not None and changes["code"] != existing["code"]:
            checks.ensure_unique(
                self.table,
                "Ya existe otra mesa con ese código",
                exclude_id=existing["id"],
                code=changes["code"],
            )
        if "voting_center_id" in changes:
            checks.require("voting_centers", changes["voting_center_id"], CENTER_NOT_FOUND)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        voters = [
            {
                **pick(voter, ("id", "document_number")),
                "user": pick(session.get("users", voter["user_id"]), ("id", "name", "email")),
            }
            for voter in session.find_all("voters", voting_table_id=record["id"])
        ]
        members = [
            {
                **pick(member, ("id", "role_in_table")),
                "user": pick(session.get("users", member["user_id"]), ("id", "name", "email")),
            }
            for member in session.find_all("table_members", voting_table_id=record["id"])
        ]
        return {
            **record,
            "voting_center": session.get("voting_centers", record["voting_center_id"]),
            "voters": voters,
            "members": members,
        }


@dataclass
class VoterService(EntityService):
    """
    Voter profiles attached to existing accounts.

    Pre-registration (profile plus a fresh placeholder account) lives in
    AccountLifecycle.
    """

    table = "voters"
    not_found_message = "Votante no encontrado"

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("users", values["user_id"], "Usuario no encontrado para crear el perfil de votante")
        checks.ensure_unique(self.table, "El usuario ya tiene un perfil de votante", user_id=values["user_id"])
        checks.ensure_unique(self.table, DOCUMENT_TAKEN, document_number=values["document_number"])
        checks.require_if_set("voting_tables", values.get("voting_table_id"), TABLE_NOT_FOUND)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if changes.get("user_id") is not None:
            checks.require("users", changes["user_id"], USER_NOT_FOUND)
            checks.ensure_unique(
                self.table,
                "El usuario ya tiene un perfil de votante",
                exclude_id=existing["id"],
                user_id=changes["user_id"],
            )
        if changes.get("document_number") is not None:
            checks.ensure_unique(
                self.table,
                DOCUMENT_TAKEN,
                exclude_id=existing["id"],
                document_number=changes["document_number"],
            )
        if "voting_table_id" in changes:
            checks.require_if_set("voting_tables", changes["voting_table_id"], TABLE_NOT_FOUND)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        return expand_voter(session, record)


@dataclass
class TableMemberService(EntityService):
    table = "table_members"
    not_found_message = "Miembro de mesa no encontrado"

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("users", values["user_id"], "Usuario no encontrado para crear el miembro de mesa")
        checks.ensure_unique(
            self.table,
            "El usuario ya está registrado como miembro de mesa",
            user_id=values["user_id"],
        )
        checks.require("voting_tables", values["voting_table_id"], TABLE_NOT_FOUND)

    def after_create(self, session: RecordSession, record: Record) -> None:
        account = session.get("users", record["user_id"])
        promote_role_if_needed(session, account, UserRole.TABLE_MEMBER)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "voting_table_id" in changes:
            checks.require("voting_tables", changes["voting_table_id"], TABLE_NOT_FOUND)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        return {
            **record,
            "user": account_summary(session.get("users", record["user_id"])),
            "voting_table": expand_voting_table(session, record["voting_table_id"]),
        }


@dataclass
class VoteIntentionService(EntityService):
    table = "vote_intentions"
    not_found_message = "Intención de voto no encontrada"
    order_by = ("-created_at", "-id")

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("users", values["user_id"], USER_NOT_FOUND)
        checks.require("candidates", values["candidate_id"], "Candidato no encontrado")
        checks.require("elections", values["election_id"], "Elección no encontrada")
        checks.ensure_unique(
            self.table,
            "La intención de voto para este candidato en esta elección ya está registrada para este usuario",
            user_id=values["user_id"],
            election_id=values["election_id"],
            candidate_id=values["candidate_id"],
        )

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "user_id" in changes:
            checks.require("users", changes["user_id"], USER_NOT_FOUND)
        if "candidate_id" in changes:
            checks.require("candidates", changes["candidate_id"], "Candidato no encontrado")
        if "election_id" in changes:
            checks.require("elections", changes["election_id"], "Elección no encontrada")

        triple = {key: changes.get(key, existing[key]) for key in ("user_id", "election_id", "candidate_id")}
        checks.ensure_unique(
            self.table,
            "Ya existe otra intención de voto con esta combinación de usuario, elección y candidato",
            exclude_id=existing["id"],
            **triple,
        )
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        candidate = session.get("candidates", record["candidate_id"])
        group = session.get("political_groups", candidate["political_group_id"]) if candidate else None
        candidate_view = pick(candidate, ("id", "full_name", "office"))
        if candidate_view is not None:
            candidate_view["political_group"] = pick(group, ("id", "name", "short_name", "logo_url"))
        return {
            **record,
            "user": account_summary(session.get("users", record["user_id"])),
            "candidate": candidate_view,
            "election": pick(session.get("elections", record["election_id"]), ("id", "name", "type", "date")),
        }
