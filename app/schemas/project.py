import re
from datetime import date, datetime, timezone
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_serializer

from app.models.project import Project, ProjectStatus
from app.services.transitions import allowed_targets


ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def _iso_calendar_date(value: Any) -> Any:
    """Only plain `YYYY-MM-DD` strings are dates on the wire."""
    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.fullmatch(value.strip()):
        raise ValueError("must be a valid ISO 8601 date (YYYY-MM-DD)")
    return value.strip()


IsoDate = Annotated[date | None, BeforeValidator(_iso_calendar_date)]


class ProjectBase(BaseModel):
    name: str = Field(max_length=200)
    client_name: str = Field(alias="clientName", max_length=200)
    start_date: IsoDate = Field(default=None, alias="startDate")
    end_date: IsoDate = Field(default=None, alias="endDate")

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class ProjectCreate(ProjectBase):
    # Missing or blank names are reported by the service with field messages.
    name: str | None = Field(default=None, max_length=200)
    client_name: str | None = Field(default=None, alias="clientName", max_length=200)


class ProjectUpdate(BaseModel):
    # Explicit nulls for name/clientName reach the service and are rejected there.
    name: str | None = Field(default=None, max_length=200)
    client_name: str | None = Field(default=None, alias="clientName", max_length=200)
    start_date: IsoDate = Field(default=None, alias="startDate")
    end_date: IsoDate = Field(default=None, alias="endDate")

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus


class ProjectOut(ProjectBase):
    id: UUID
    status: ProjectStatus
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    allowed_transitions: list[ProjectStatus] = Field(
        default_factory=list, alias="allowedTransitions"
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @classmethod
    def from_project(cls, project: Project) -> "ProjectOut":
        out = cls.model_validate(project)
        out.allowed_transitions = allowed_targets(project.status)
        return out

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        # SQLite hands back naive values; everything is stored in UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)


class ProjectEnvelope(BaseModel):
    success: bool = True
    data: ProjectOut


class ProjectListEnvelope(BaseModel):
    success: bool = True
    data: list[ProjectOut]
    pagination: Pagination
