"""
app/schemas/common.py

Shared response pieces.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from db.repositories.types import Page


class PaginationResponse(BaseModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool

    @classmethod
    def from_page(cls, page: Page) -> "PaginationResponse":
        return cls(
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_prev=page.has_prev,
        )


class VersionedRequest(BaseModel):
    """
    Optional optimistic-concurrency token: the declaration version the
    client last read.
    """

    expected_version: int | None = Field(default=None, ge=1)
