"""
app/api/routers/dashboard.py

Account overview endpoint.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_account_id
from app.schemas.dashboard import (
    ActivityItemResponse,
    DashboardResponse,
    DashboardStatsResponse,
    GroupTotalsResponse,
)
from app.schemas.declarations import DeclarationResponse
from app.services.dashboard_service import DashboardService, get_dashboard_service
from db.repositories.types import GroupTotals
from db.session import get_db
from ledger.vocabulary import sector_label

router = APIRouter(tags=["dashboard"])


def _group(totals: GroupTotals, label: str | None = None) -> GroupTotalsResponse:
    return GroupTotalsResponse(
        key=totals.key,
        label=label,
        total_imports=totals.total_imports,
        total_quantity=totals.total_quantity,
        total_value=totals.total_value,
        total_emissions=totals.total_emissions,
    )


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = service.get_dashboard(db=db, account_id=account_id)
    stats = dashboard.stats

    return DashboardResponse(
        stats=DashboardStatsResponse(
            total_declarations=stats.total_declarations,
            pending_declarations=stats.pending_declarations,
            completed_declarations=stats.completed_declarations,
            total_imports=stats.total_imports,
            total_emissions=stats.total_emissions,
            total_value=stats.total_value,
            next_deadline=stats.next_deadline,
            recent_activity=[ActivityItemResponse.model_validate(item) for item in stats.recent_activity],
        ),
        recent_declarations=[
            DeclarationResponse.from_model(item, today=dashboard.as_of) for item in dashboard.recent_declarations
        ],
        sector_stats=[_group(item, sector_label(item.key)) for item in dashboard.sector_stats],
        country_stats=[_group(item) for item in dashboard.country_stats],
        monthly_trends=[_group(item) for item in dashboard.monthly_trends],
    )
