import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Date, DateTime, Enum, Index, String

from app.db.session import Base
from app.db.types import GUID


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProjectStatus(str, enum.Enum):
    active = "active"
    on_hold = "on_hold"
    completed = "completed"


STATUS_VALUES = frozenset(status.value for status in ProjectStatus)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_status", "status"),
        Index("ix_projects_created_at", "created_at"),
        Index("ix_projects_deleted_at", "deleted_at"),
    )

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    client_name = Column(String(200), nullable=False)
    status = Column(
        Enum(ProjectStatus, name="projectstatus", create_constraint=True),
        nullable=False,
        default=ProjectStatus.active,
    )
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
