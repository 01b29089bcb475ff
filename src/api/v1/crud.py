"""
Generic CRUD routers.

One router per entity exposes create, list, fetch, partial update and
delete over an EntityService, all wrapped in the response envelope.
"""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import APIRouter, Depends, status

from src.api.dependencies import entity_service
from src.api.models import PartialUpdate, RequestModel, ServiceResponse, respond
from src.domain.entities import EntityService

ERROR_RESPONSES = {
    400: {"model": ServiceResponse, "description": "Invalid field combination"},
    404: {"model": ServiceResponse, "description": "Record or referenced record not found"},
    409: {"model": ServiceResponse, "description": "Uniqueness or reference violated"},
    422: {"model": ServiceResponse, "description": "Validation error"},
}


@dataclass(frozen=True)
class Messages:
    """Success messages for one entity's endpoints."""

    created: str
    listed: str
    fetched: str
    updated: str
    removed: str


def crud_router(
    prefix: str,
    tag: str,
    service_class: type[EntityService],
    create_model: type[RequestModel],
    update_model: type[PartialUpdate],
    messages: Messages,
    dependency: Callable[..., EntityService] | None = None,
) -> APIRouter:
    """
    Build the five CRUD endpoints for one entity under ``prefix``.

    ``dependency`` overrides the default service factory when the service
    needs more than the record store.
    """
    router = APIRouter(prefix=prefix, tags=[tag], responses=ERROR_RESPONSES)
    get_service = dependency or entity_service(service_class)

    @router.post(
        "",
        response_model=ServiceResponse,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {tag}",
    )
    def create(payload: create_model, service: EntityService = Depends(get_service)) -> ServiceResponse:
        record = service.create(payload.model_dump())
        return respond(record, messages.created, status.HTTP_201_CREATED)

    @router.get("", response_model=ServiceResponse, summary=f"List {tag}")
    def find_all(service: EntityService = Depends(get_service)) -> ServiceResponse:
        return respond(service.find_all(), messages.listed)

    @router.get("/{record_id}", response_model=ServiceResponse, summary=f"Get {tag}")
    def find_one(record_id: int, service: EntityService = Depends(get_service)) -> ServiceResponse:
        return respond(service.find_one(record_id), messages.fetched)

    @router.patch("/{record_id}", response_model=ServiceResponse, summary=f"Update {tag}")
    def update(
        record_id: int,
        payload: update_model,
        service: EntityService = Depends(get_service),
    ) -> ServiceResponse:
        return respond(service.update(record_id, payload.changes()), messages.updated)

    @router.delete("/{record_id}", response_model=ServiceResponse, summary=f"Delete {tag}")
    def remove(record_id: int, service: EntityService = Depends(get_service)) -> ServiceResponse:
        return respond(service.remove(record_id), messages.removed)

    return router
