"""
Typed DTOs used by the ledger repositories.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """
    One page of a sorted listing. ``page`` is 1-based.
    """

    page: int = 1
    limit: int = 10
    sort_by: str = "created_at"
    descending: bool = True

    @property
    def offset(self) -> int:
        return (max(1, self.page) - 1) * self.limit


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


@dataclass(frozen=True)
class DeclarationFilters:
    status: str | None = None
    year: int | None = None
    quarter: int | None = None
    search: str | None = None


@dataclass(frozen=True)
class ProductFilters:
    sector: str | None = None
    search: str | None = None
    active_only: bool = True


@dataclass(frozen=True)
class SupplierFilters:
    country: str | None = None
    is_verified: bool | None = None
    search: str | None = None


@dataclass(frozen=True)
class GroupTotals:
    """
    Import totals for one grouping key (sector, country or month).
    """

    key: str
    total_imports: int
    total_quantity: float
    total_value: float
    total_emissions: float


@dataclass(frozen=True)
class ImportTotals:
    total_imports: int = 0
    total_emissions: float = 0.0
    total_value: float = 0.0
