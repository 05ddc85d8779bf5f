import logging
from dataclasses import dataclass
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.query import apply_pagination, apply_sort, total_pages
from app.core.errors import InternalError, NotFoundError
from app.models import Project, ProjectStatus
from app.models.project import STATUS_VALUES, utc_now
from app.services.transitions import ensure_transition
from app.services.validation import editable_changes, effective_record, validate_project

logger = logging.getLogger("projects")

SORTABLE_COLUMNS = {
    "name": Project.name,
    "clientName": Project.client_name,
    "status": Project.status,
    "startDate": Project.start_date,
    "endDate": Project.end_date,
    "createdAt": Project.created_at,
    "updatedAt": Project.updated_at,
}
DEFAULT_SORT = "createdAt"


@dataclass
class ProjectPage:
    items: list[Project]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)


def _log_event(name: str, project: Project, **details: Any) -> None:
    logger.info(name, extra={"event": {"project_id": str(project.id), **details}})


def _commit(db: Session, project: Project | None = None) -> None:
    try:
        db.commit()
        if project is not None:
            db.refresh(project)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Project write failed")
        raise InternalError() from exc


def live_projects(db: Session):
    return db.query(Project).filter(Project.deleted_at.is_(None))


def get_project(db: Session, project_id: UUID) -> Project:
    project = live_projects(db).filter(Project.id == project_id).first()
    if project is None:
        raise NotFoundError()
    return project


def list_projects(
    db: Session,
    *,
    status: str | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str | None = None,
    order: str | None = None,
) -> ProjectPage:
    q = live_projects(db)
    # Unknown status values mean "no filter".
    if status in STATUS_VALUES:
        q = q.filter(Project.status == ProjectStatus(status))
    if search:
        q = q.filter(
            or_(
                Project.name.icontains(search, autoescape=True),
                Project.client_name.icontains(search, autoescape=True),
            )
        )
    total = q.count()
    # Pages past the end never reach the store; huge offsets overflow SQLite INTEGER.
    if (page - 1) * limit >= total:
        return ProjectPage(items=[], page=page, limit=limit, total=total)
    q = apply_sort(q, sort_by, order, SORTABLE_COLUMNS, DEFAULT_SORT, tiebreaker=Project.id)
    items = apply_pagination(q, page, limit).all()
    return ProjectPage(items=items, page=page, limit=limit, total=total)


def create_project(db: Session, data: Mapping[str, Any]) -> Project:
    cleaned = validate_project(effective_record({}, data))
    now = utc_now()
    project = Project(
        name=cleaned["name"],
        client_name=cleaned["client_name"],
        status=ProjectStatus.active,
        start_date=cleaned["start_date"],
        end_date=cleaned["end_date"],
        created_at=now,
        updated_at=now,
    )
    db.add(project)
    _commit(db, project)
    _log_event("project_created", project)
    return project


def update_project(db: Session, project_id: UUID, patch: Mapping[str, Any]) -> Project:
    project = get_project(db, project_id)
    changes = editable_changes(patch)
    if not changes:
        return project

    stored = {
        "name": project.name,
        "client_name": project.client_name,
        "start_date": project.start_date,
        "end_date": project.end_date,
    }
    cleaned = validate_project(effective_record(stored, changes))
    for field in changes:
        setattr(project, field, cleaned[field])
    project.updated_at = utc_now()
    _commit(db, project)
    _log_event("project_updated", project, fields=sorted(changes))
    return project


def change_status(db: Session, project_id: UUID, requested: ProjectStatus | str) -> Project:
    project = get_project(db, project_id)
    previous = project.status
    project.status = ensure_transition(previous, requested)
    project.updated_at = utc_now()
    _commit(db, project)
    _log_event(
        "project_status_changed",
        project,
        **{"from": previous.value, "to": project.status.value},
    )
    return project


def soft_delete_project(db: Session, project_id: UUID) -> None:
    project = get_project(db, project_id)
    now = utc_now()
    project.deleted_at = now
    project.updated_at = now
    _commit(db)
    _log_event("project_deleted", project)
