"""
app/services/dashboard_service.py

Per-account overview: declaration counts, import totals, the next
regulatory deadline, recent activity and grouped import statistics.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy.orm import Session

from db.base import utcnow
from db.models.declaration import CbamDeclaration
from db.repositories.declaration_repository import DeclarationRepository
from db.repositories.import_line_repository import ImportLineRepository
from db.repositories.types import GroupTotals
from ledger.deadlines import add_months, next_regulatory_deadline, period_label
from ledger.vocabulary import DeclarationStatus

RECENT_DECLARATIONS = 5
TOP_COUNTRIES = 10
TREND_MONTHS = 6


class ActivityType:
    DECLARATION_CREATED = "declaration_created"
    DECLARATION_SUBMITTED = "declaration_submitted"
    DECLARATION_VALIDATED = "declaration_validated"


@dataclass(frozen=True)
class ActivityItem:
    declaration_id: uuid.UUID
    type: str
    description: str
    occurred_at: datetime


@dataclass(frozen=True)
class DashboardStats:
    total_declarations: int
    pending_declarations: int
    completed_declarations: int
    total_imports: int
    total_emissions: float
    total_value: float
    next_deadline: date
    recent_activity: list[ActivityItem] = field(default_factory=list)


@dataclass(frozen=True)
class Dashboard:
    as_of: date
    stats: DashboardStats
    recent_declarations: list[CbamDeclaration]
    sector_stats: list[GroupTotals]
    country_stats: list[GroupTotals]
    monthly_trends: list[GroupTotals]


def activity_for(declaration: CbamDeclaration) -> ActivityItem:
    """The most advanced lifecycle event of a declaration."""

    label = period_label(declaration.reporting_year, declaration.reporting_quarter)
    if declaration.validated_at is not None:
        return ActivityItem(
            declaration_id=declaration.id,
            type=ActivityType.DECLARATION_VALIDATED,
            description=f"Declaration {label} validated",
            occurred_at=declaration.validated_at,
        )
    if declaration.submitted_at is not None:
        return ActivityItem(
            declaration_id=declaration.id,
            type=ActivityType.DECLARATION_SUBMITTED,
            description=f"Declaration {label} submitted",
            occurred_at=declaration.submitted_at,
        )
    return ActivityItem(
        declaration_id=declaration.id,
        type=ActivityType.DECLARATION_CREATED,
        description=f"Declaration {label} created",
        occurred_at=declaration.created_at,
    )


def _sort_key(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC.
    return moment.replace(tzinfo=None)


class DashboardService:
    def __init__(self, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock

    def get_dashboard(self, *, db: Session, account_id: uuid.UUID) -> Dashboard:
        now = self._clock()
        declarations = DeclarationRepository(db)
        imports = ImportLineRepository(db)

        counts = declarations.count_by_status(account_id)
        recent = declarations.recent_for_account(account_id, limit=RECENT_DECLARATIONS)
        totals = imports.totals_for_account(account_id)

        activity = sorted(
            (activity_for(declaration) for declaration in recent),
            key=lambda item: _sort_key(item.occurred_at),
            reverse=True,
        )

        stats = DashboardStats(
            total_declarations=sum(counts.values()),
            pending_declarations=counts.get(DeclarationStatus.DRAFT, 0)
            + counts.get(DeclarationStatus.PENDING, 0),
            completed_declarations=counts.get(DeclarationStatus.VALIDATED, 0),
            total_imports=totals.total_imports,
            total_emissions=totals.total_emissions,
            total_value=totals.total_value,
            next_deadline=next_regulatory_deadline(now.date()),
            recent_activity=activity[:RECENT_DECLARATIONS],
        )

        return Dashboard(
            as_of=now.date(),
            stats=stats,
            recent_declarations=recent,
            sector_stats=imports.totals_by_sector(account_id),
            country_stats=imports.totals_by_country(account_id, limit=TOP_COUNTRIES),
            monthly_trends=imports.monthly_totals(account_id, since=add_months(now, -TREND_MONTHS)),
        )


def get_dashboard_service() -> DashboardService:
    return DashboardService()
