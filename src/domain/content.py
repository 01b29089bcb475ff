"""
Content services - posts, comments and post moderation alerts.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .credentials import utc_now
from .entities import EntityService
from .exceptions import BadRequest
from .integrity import IntegrityValidator
from .ports import ModerationStatus, PostStatus, Record, RecordSession
from .projections import account_summary, pick

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post no encontrado"
PARENT_NOT_FOUND = "Comentario padre no encontrado"
PARENT_OTHER_POST = "El comentario padre debe pertenecer al mismo post"


@dataclass
class PostService(EntityService):
    table = "posts"
    not_found_message = POST_NOT_FOUND
    order_by = ("-created_at", "-id")

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("users", values["author_id"], "Autor del post no encontrado")
        checks.require_if_set("candidates", values.get("candidate_id"), "Candidato no encontrado")
        if values.get("status") is None:
            values["status"] = PostStatus.PUBLISHED.value

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "author_id" in changes:
            checks.require("users", changes["author_id"], "Autor del post no encontrado")
        if "candidate_id" in changes:
            checks.require_if_set("candidates", changes["candidate_id"], "Candidato no encontrado")
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        candidate = session.get("candidates", record["candidate_id"]) if record.get("candidate_id") else None
        candidate_view = pick(candidate, ("id", "full_name", "office"))
        if candidate_view is not None:
            group = session.get("political_groups", candidate["political_group_id"])
            candidate_view["political_group"] = pick(group, ("id", "name", "short_name", "logo_url"))
        return {
            **record,
            "author": account_summary(session.get("users", record["author_id"])),
            "candidate": candidate_view,
            "comments": session.find_all("comments", order_by=("created_at", "id"), post_id=record["id"]),
            "moderation_alerts": session.find_all("post_moderation_alerts", post_id=record["id"]),
        }


@dataclass
class CommentService(EntityService):
    """Comments on posts; replies must stay within their parent's post."""

    table = "comments"
    not_found_message = "Comentario no encontrado"
    order_by = ("-created_at", "-id")

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("posts", values["post_id"], "Post no encontrado para asociar el comentario")
        checks.require("users", values["author_id"], "Autor del comentario no encontrado")
        parent = checks.require_if_set("comments", values.get("parent_id"), PARENT_NOT_FOUND)
        if parent is not None and parent["post_id"] != values["post_id"]:
            raise BadRequest(PARENT_OTHER_POST)

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if changes.get("parent_id") is not None:
            if changes["parent_id"] == existing["id"]:
                raise BadRequest("Un comentario no puede ser padre de sí mismo")
            parent = checks.require("comments", changes["parent_id"], PARENT_NOT_FOUND)
            if parent["post_id"] != existing["post_id"]:
                raise BadRequest(PARENT_OTHER_POST)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        parent = session.get("comments", record["parent_id"]) if record.get("parent_id") else None
        parent_view = pick(parent, ("id", "content"))
        if parent_view is not None:
            parent_view["author"] = pick(session.get("users", parent["author_id"]), ("id", "name"))
        replies = [
            {
                **pick(reply, ("id", "content", "created_at")),
                "author": pick(session.get("users", reply["author_id"]), ("id", "name")),
            }
            for reply in session.find_all("comments", order_by=("created_at", "id"), parent_id=record["id"])
        ]
        return {
            **record,
            "author": account_summary(session.get("users", record["author_id"])),
            "post": pick(session.get("posts", record["post_id"]), ("id", "title", "candidate_id")),
            "parent": parent_view,
            "replies": replies,
        }


@dataclass
class PostModerationAlertService(EntityService):
    """
    Moderation alerts raised against posts and reviewed by admins.

    Review timestamp policy: when an update moves the status away from
    PENDING without supplying reviewed_at, and the alert has never been
    stamped, the current time is recorded.
    """

    table = "post_moderation_alerts"
    not_found_message = "Alerta de moderación no encontrada"
    order_by = ("-created_at", "-id")

    clock: Callable[[], datetime] = field(default=utc_now)

    def validate_create(self, checks: IntegrityValidator, values: dict[str, Any]) -> None:
        checks.require("posts", values["post_id"], "Post no encontrado para crear la alerta de moderación")
        if values.get("status") is None:
            values["status"] = ModerationStatus.PENDING.value

    def validate_update(
        self, checks: IntegrityValidator, existing: Record, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if "reviewed_by_admin_id" in changes:
            checks.require_if_set(
                "users",
                changes["reviewed_by_admin_id"],
                "Usuario administrador que revisa la alerta no encontrado",
            )
        status = changes.get("status")
        if (
            changes.get("reviewed_at") is None
            and status is not None
            and status != ModerationStatus.PENDING.value
            and existing.get("reviewed_at") is None
        ):
            changes["reviewed_at"] = self.clock()
            logger.info("Alert %s reviewed as %s", existing["id"], status)
        return changes

    def expand(self, session: RecordSession, record: Record) -> Record:
        admin_id = record.get("reviewed_by_admin_id")
        admin = session.get("users", admin_id) if admin_id is not None else None
        return {
            **record,
            "post": pick(session.get("posts", record["post_id"]), ("id", "title", "status", "candidate_id")),
            "reviewed_by_admin": account_summary(admin),
        }
