# jobportal/services/pagination.py
"""
Offset pagination shared by every listing endpoint.

For ``page >= 1`` and ``limit >= 1`` the window starts at
``(page - 1) * limit``; ``next`` is present only while items remain after
the window and ``prev`` only when the window does not start at zero.
"""
from flask import current_app
from sqlalchemy import asc, desc


def _as_positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def page_args(args) -> tuple[int, int]:
    """Read ``page``/``limit`` from a mapping (usually ``request.args``)."""
    default_limit = current_app.config.get("DEFAULT_PAGE_SIZE", 10)
    max_limit = current_app.config.get("MAX_PAGE_SIZE", 100)
    page = _as_positive_int(args.get("page"), 1)
    limit = min(_as_positive_int(args.get("limit"), default_limit), max_limit)
    return page, limit


def page_links(page: int, limit: int, total: int) -> dict:
    start = (page - 1) * limit
    links = {}
    if start + limit < total:
        links["next"] = {"page": page + 1, "limit": limit}
    if start > 0:
        links["prev"] = {"page": page - 1, "limit": limit}
    return links


def paginate(query, page: int, limit: int, serialize=None) -> dict:
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    items = [serialize(r) for r in rows] if serialize else rows
    return {
        "items": items,
        "count": len(items),
        "total": total,
        "pagination": page_links(page, limit, total),
    }


def sort_clauses(sort: str, keys: dict, default_col) -> list:
    """'-createdAt,title' -> [desc(created_at), asc(title)]; unknown keys are ignored."""
    clauses = []
    for part in (sort or "").split(","):
        part = part.strip()
        if not part:
            continue
        direction = desc if part.startswith("-") else asc
        col = keys.get(part.lstrip("-+"))
        if col is not None:
            clauses.append(direction(col))
    return clauses or [desc(default_col)]
