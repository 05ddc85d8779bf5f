from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.api import deps
from app.api.query import SEARCH_MAX_LENGTH
from app.api.responses import BAD_REQUEST, NOT_FOUND, RATE_LIMITED
from app.core.config import settings
from app.core.limiter import write_limit
from app.schemas.common import MessageResponse
from app.schemas.project import (
    Pagination,
    ProjectCreate,
    ProjectEnvelope,
    ProjectListEnvelope,
    ProjectOut,
    ProjectStatusUpdate,
    ProjectUpdate,
)
from app.services import projects as project_service

router = APIRouter(prefix="/projects", tags=["projects"], responses=RATE_LIMITED)


def _envelope(project) -> ProjectEnvelope:
    return ProjectEnvelope(data=ProjectOut.from_project(project))


@router.post(
    "",
    response_model=ProjectEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
@write_limit
def create_project(
    payload: ProjectCreate,
    request: Request,
    db: Session = Depends(deps.get_db),
):
    project = project_service.create_project(db, payload.model_dump())
    return _envelope(project)


@router.get("", response_model=ProjectListEnvelope, responses=BAD_REQUEST)
def list_projects(
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=SEARCH_MAX_LENGTH),
    page: int = Query(default=1, ge=1),
    limit: int = Query(
        default=settings.default_page_limit, ge=1, le=settings.max_page_limit
    ),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    order: str | None = Query(default=None),
    db: Session = Depends(deps.get_db),
):
    result = project_service.list_projects(
        db,
        status=status_filter,
        search=search,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
    )
    return ProjectListEnvelope(
        data=[ProjectOut.from_project(p) for p in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.get(
    "/{project_id}",
    response_model=ProjectEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
def get_project_detail(
    project_id: UUID = Depends(deps.valid_project_id),
    db: Session = Depends(deps.get_db),
):
    return _envelope(project_service.get_project(db, project_id))


@router.put(
    "/{project_id}",
    response_model=ProjectEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
@write_limit
def update_project(
    payload: ProjectUpdate,
    request: Request,
    project_id: UUID = Depends(deps.valid_project_id),
    db: Session = Depends(deps.get_db),
):
    data = payload.model_dump(exclude_unset=True)
    project = project_service.update_project(db, project_id, data)
    return _envelope(project)


@router.patch(
    "/{project_id}/status",
    response_model=ProjectEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
@write_limit
def update_project_status(
    payload: ProjectStatusUpdate,
    request: Request,
    project_id: UUID = Depends(deps.valid_project_id),
    db: Session = Depends(deps.get_db),
):
    project = project_service.change_status(db, project_id, payload.status)
    return _envelope(project)


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
@write_limit
def delete_project(
    request: Request,
    project_id: UUID = Depends(deps.valid_project_id),
    db: Session = Depends(deps.get_db),
):
    project_service.soft_delete_project(db, project_id)
    return MessageResponse(message="Project deleted successfully")
