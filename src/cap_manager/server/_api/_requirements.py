# pyright: reportUnusedFunction=false
"""Requirement CRUD endpoints.

Handlers are synchronous; FastAPI runs them in its threadpool so file I/O
does not block the event loop. Store exceptions propagate to the handlers
registered in ``cap_manager.server._app``.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from cap_manager.server._schemas import (
    CreateRequirementRequest,
    MessageResponse,
    RequirementListResponse,
    RequirementModel,
    RequirementResponse,
    UpdateRequirementRequest,
)
from cap_manager.store import build_query

from ._deps import StoreDep

router = APIRouter(prefix="/requirements", tags=["requirements"])


@router.get("", response_model_exclude_none=True)
def list_requirements(  # noqa: PLR0913
    store: StoreDep,
    status_: Annotated[str | None, Query(alias="status")] = None,
    since: str | None = None,
    until: str | None = None,
    linked: bool = False,
    unlinked: bool = False,
    sort: str | None = None,
    order: str | None = None,
) -> RequirementListResponse:
    query = build_query(
        status=status_,
        since=since,
        until=until,
        linked=linked,
        unlinked=unlinked,
        sort=sort,
        order=order,
    )
    return RequirementListResponse(
        data=[RequirementModel.from_requirement(req) for req in store.list(query)]
    )


@router.get("/{requirement_id}", response_model_exclude_none=True)
def get_requirement(requirement_id: int, store: StoreDep) -> RequirementResponse:
    return RequirementResponse(
        data=RequirementModel.from_requirement(store.get(requirement_id))
    )


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model_exclude_none=True
)
def create_requirement(
    body: CreateRequirementRequest, store: StoreDep
) -> RequirementResponse:
    req = store.add(body.title, body.description, external_link=body.external_link)
    return RequirementResponse(
        data=RequirementModel.from_requirement(req),
        message=f"Successfully created requirement #{req.id}",
    )


@router.put("/{requirement_id}", response_model_exclude_none=True)
def update_requirement(
    requirement_id: int, body: UpdateRequirementRequest, store: StoreDep
) -> RequirementResponse:
    req = store.update(
        requirement_id,
        title=body.title,
        description=body.description,
        status=body.status,
        notes=body.notes,
        external_link=body.external_link,
    )
    return RequirementResponse(
        data=RequirementModel.from_requirement(req),
        message=f"Successfully updated requirement #{requirement_id}",
    )


@router.delete("/{requirement_id}")
def delete_requirement(requirement_id: int, store: StoreDep) -> MessageResponse:
    _ = store.delete(requirement_id)
    return MessageResponse(message=f"Successfully deleted requirement #{requirement_id}")
