"""Offset pagination shared by the stores."""

from typing import Any

from sqlalchemy.orm import Query


def paginate(query: Query, page: int, size: int) -> tuple[list[Any], int]:
    """Return (items for zero-based page, total row count)."""
    total = query.order_by(None).count()
    items = query.offset(page * size).limit(size).all()
    return items, total


def like_pattern(term: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards in the term escaped."""
    escaped = term.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
