import math

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

SEARCH_MAX_LENGTH = 200


def normalize_order(order: str | None) -> str:
    return "asc" if (order or "").strip().lower() == "asc" else "desc"


def apply_sort(
    query: Query,
    sort_by: str | None,
    order: str | None,
    allowed: dict[str, object],
    default: str,
    tiebreaker=None,
) -> Query:
    column = allowed.get(sort_by or "", allowed[default])
    direction = asc if normalize_order(order) == "asc" else desc
    query = query.order_by(direction(column))
    if tiebreaker is not None:
        query = query.order_by(direction(tiebreaker))
    return query


def apply_pagination(query: Query, page: int, limit: int) -> Query:
    page = max(page, 1)
    limit = max(limit, 1)
    offset = (page - 1) * limit
    return query.offset(offset).limit(limit)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / max(limit, 1))
