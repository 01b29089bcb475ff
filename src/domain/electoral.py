"""
Electoral catalogue services.

Political groups, candidates, elections, electoral events, government
plans and their sections, news items and voter guides. These follow the
shallow pattern: optional or mandatory parents validated on write,
related rows embedded on read. Candidates additionally bind at most one
account each.
"""

from dataclasses import dataclass
from typing import Any

from .entities import EntityService
from .integrity import IntegrityValidator
from .ports import Record, RecordSession
from .projections import account_summary, pick

GROUP_NOT_FOUND = "Agrupación política no encontrada"
ELECTION_NOT_FOUND = "Elección no encontrada"
PLAN_NOT_FOUND = "Plan de gobierno no encontrado"

GROUP_FIELDS = ("id", "name", "short_name", "logo_url")
ELECTION_FIELDS = ("id", "name", "type", "date")


@dataclass
class PoliticalGroupService(EntityService):
    table = "political_groups"
    not_found_message = GROUP_NOT_FOUND
    order_by = ("name",)

    def expand(self, session: RecordSession, record: Record) -> Record:
        return {
            **record,
            "government_plans": session.find_all("government_plans", political_group_id=record["id"]),
            "candidates": session.find_all("candidates", political_group_id=record["id"]),
            "news": session.find_all("news_items", order_by=("-published_at",), political_group_id=record["id"]),
        }


@dataclass
class CandidateService(EntityService):
    table = "candidates"
    not_found_message = "Candidato no encontrado"
    order_by = ("full_name",)

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("political_groups", values["political_group_id"], GROUP_NOT_FOUND)
        if values.get("user_id") is not None:
            self._check_account(checks, values["user_id"])

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "political_group_id" in changes:
            checks.require("political_groups", changes["political_group_id"], GROUP_NOT_FOUND)
        if changes.get("user_id") is not None:
            self._check_account(checks, changes["user_id"], exclude_id=existing["id"])
        return changes

    def _check_account(self, checks: IntegrityValidator, user_id: int, exclude_id: int | None = None) -> None:
        checks.require("users", user_id, "Usuario asociado al candidato no encontrado")
        checks.ensure_unique(
            self.table,
            "Este usuario ya está asociado a otro candidato",
            exclude_id=exclude_id,
            user_id=user_id,
        )

    def expand(self, session: RecordSession, record: Record) -> Record:
        user = session.get("users", record["user_id"]) if record.get("user_id") is not None else None
        return {
            **record,
            "political_group": pick(session.get("political_groups", record["political_group_id"]), GROUP_FIELDS),
            "user": account_summary(user),
            "posts": session.find_all("posts", order_by=("-created_at",), candidate_id=record["id"]),
        }


@dataclass
class ElectionService(EntityService):
    table = "elections"
    not_found_message = ELECTION_NOT_FOUND
    order_by = ("date",)

    def expand(self, session: RecordSession, record: Record) -> Record:
        return {
            **record,
            "events": session.find_all("electoral_events", order_by=("date",), election_id=record["id"]),
            "news": session.find_all("news_items", order_by=("-published_at",), election_id=record["id"]),
            "guides": session.find_all("guide_contents", election_id=record["id"]),
        }


@dataclass
class ElectoralEventService(EntityService):
    table = "electoral_events"
    not_found_message = "Evento electoral no encontrado"
    order_by = ("date",)

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("elections", values["election_id"], ELECTION_NOT_FOUND)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "election_id" in changes:
            checks.require("elections", changes["election_id"], ELECTION_NOT_FOUND)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        return {**record, "election": pick(session.get("elections", record["election_id"]), ELECTION_FIELDS)}


@dataclass
class GovernmentPlanService(EntityService):
    table = "government_plans"
    not_found_message = PLAN_NOT_FOUND
    order_by = ("political_group_id", "-from_year")

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("political_groups", values["political_group_id"], GROUP_NOT_FOUND)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "political_group_id" in changes:
            checks.require("political_groups", changes["political_group_id"], GROUP_NOT_FOUND)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        sections = session.find_all("government_plan_sections", order_by=("sort_order",), government_plan_id=record["id"])
        return {
            **record,
            "political_group": pick(session.get("political_groups", record["political_group_id"]), GROUP_FIELDS),
            "sections": [pick(section, ("id", "sector", "title", "sort_order")) for section in sections],
        }


@dataclass
class GovernmentPlanSectionService(EntityService):
    table = "government_plan_sections"
    not_found_message = "Sección del plan de gobierno no encontrada"
    order_by = ("government_plan_id", "sort_order")

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("government_plans", values["government_plan_id"], PLAN_NOT_FOUND)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "government_plan_id" in changes:
            checks.require("government_plans", changes["government_plan_id"], PLAN_NOT_FOUND)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        plan = session.get("government_plans", record["government_plan_id"])
        plan_view = pick(plan, ("id", "title"))
        if plan_view is not None:
            plan_view["political_group"] = pick(session.get("political_groups", plan["political_group_id"]), GROUP_FIELDS)
        return {**record, "government_plan": plan_view}


@dataclass
class NewsItemService(EntityService):
    table = "news_items"
    not_found_message = "Noticia no encontrada"
    order_by = ("-published_at", "-id")

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require_if_set("elections", values.get("election_id"), ELECTION_NOT_FOUND)
        checks.require_if_set("political_groups", values.get("political_group_id"), GROUP_NOT_FOUND)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "election_id" in changes:
            checks.require_if_set("elections", changes["election_id"], ELECTION_NOT_FOUND)
        if "political_group_id" in changes:
            checks.require_if_set("political_groups", changes["political_group_id"], GROUP_NOT_FOUND)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        election = session.get("elections", record["election_id"]) if record.get("election_id") else None
        group = session.get("political_groups", record["political_group_id"]) if record.get("political_group_id") else None
        return {
            **record,
            "election": pick(election, ELECTION_FIELDS),
            "political_group": pick(group, GROUP_FIELDS),
        }


@dataclass
class GuideContentService(EntityService):
    table = "guide_contents"
    not_found_message = "Contenido de guía no encontrado"
    order_by = ("category", "id")

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require_if_set("elections", values.get("election_id"), ELECTION_NOT_FOUND)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "election_id" in changes:
            checks.require_if_set("elections", changes["election_id"], ELECTION_NOT_FOUND)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        election = session.get("elections", record["election_id"]) if record.get("election_id") else None
        return {**record, "election": pick(election, ELECTION_FIELDS)}
