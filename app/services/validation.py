"""Field rules shared by create and update.

Validation always runs on the effective record: the stored values with the
supplied fields laid over them. Nothing here touches the database.
"""

from datetime import date
from typing import Any, Mapping

from app.core.errors import ValidationError

EDITABLE_FIELDS = ("name", "client_name", "start_date", "end_date")
REQUIRED_TEXT_FIELDS = {"name": "Project name", "client_name": "Client name"}
PUBLIC_NAMES = {
    "name": "name",
    "client_name": "clientName",
    "start_date": "startDate",
    "end_date": "endDate",
}
DATE_ORDER_MESSAGE = "endDate must be greater than or equal to startDate"


def editable_changes(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the fields the generic update path may write."""
    return {key: patch[key] for key in EDITABLE_FIELDS if key in patch}


def effective_record(stored: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    candidate = {key: stored.get(key) for key in EDITABLE_FIELDS}
    candidate.update(editable_changes(patch))
    return candidate


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def validate_project(candidate: Mapping[str, Any]) -> dict[str, Any]:
    """Check an effective record and return it with normalised values.

    Names are trimmed, dates parsed. Raises ``ValidationError`` listing every
    field problem, or carrying the date-order message when only the range is
    wrong.
    """
    cleaned = dict(candidate)
    errors = []

    for key, label in REQUIRED_TEXT_FIELDS.items():
        value = candidate.get(key)
        if value is None or not isinstance(value, str) or not value.strip():
            errors.append(
                {
                    "field": PUBLIC_NAMES[key],
                    "message": f"{label} is required",
                    "location": "body",
                }
            )
        else:
            cleaned[key] = value.strip()

    for key in ("start_date", "end_date"):
        value = candidate.get(key)
        if value is None or value == "":
            cleaned[key] = None
            continue
        try:
            cleaned[key] = _parse_date(value)
        except (TypeError, ValueError):
            errors.append(
                {
                    "field": PUBLIC_NAMES[key],
                    "message": f"{PUBLIC_NAMES[key]} must be a valid ISO 8601 date",
                    "location": "body",
                }
            )

    if errors:
        raise ValidationError("Validation failed", errors=errors)

    start, end = cleaned.get("start_date"), cleaned.get("end_date")
    if start is not None and end is not None and end < start:
        raise ValidationError(DATE_ORDER_MESSAGE)
    return cleaned
