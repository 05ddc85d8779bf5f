from uuid import UUID

from app.core.errors import ValidationError
from app.db.session import get_db

__all__ = ["get_db", "valid_project_id"]


def valid_project_id(project_id: str) -> UUID:
    """Parse the path id; malformed ids are a 400 and never reach the store."""
    try:
        parsed = UUID(project_id)
    except (TypeError, ValueError):
        parsed = None
    if parsed is None or str(parsed) != project_id.lower():
        raise ValidationError(
            "Invalid project ID",
            errors=[{"field": "id", "message": "Invalid project ID", "location": "path"}],
        )
    return parsed
