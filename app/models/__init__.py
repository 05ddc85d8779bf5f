from app.models.project import Project, ProjectStatus

__all__ = [
    "Project",
    "ProjectStatus",
]
