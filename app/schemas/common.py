"""Shared response shapes: paging envelope."""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One zero-based page of results plus totals."""

    items: list[T]
    page: int = Field(..., ge=0)
    size: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)

    @classmethod
    def build(cls, items: list[T], page: int, size: int, total: int) -> "Page[T]":
        total_pages = (total + size - 1) // size if total else 0
        return cls(items=items, page=page, size=size, total=total, total_pages=total_pages)


SortDirection = Literal["asc", "desc"]
