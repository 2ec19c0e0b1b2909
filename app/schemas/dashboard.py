"""
app/schemas/dashboard.py

Response schemas for the account dashboard.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from app.schemas.declarations import DeclarationResponse


class ActivityItemResponse(BaseModel):
    declaration_id: uuid.UUID
    type: str
    description: str
    occurred_at: datetime

    model_config = {"from_attributes": True}


class DashboardStatsResponse(BaseModel):
    total_declarations: int = Field(..., ge=0)
    pending_declarations: int = Field(..., ge=0)
    completed_declarations: int = Field(..., ge=0)
    total_imports: int = Field(..., ge=0)
    total_emissions: float
    total_value: float
    next_deadline: date
    recent_activity: list[ActivityItemResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class GroupTotalsResponse(BaseModel):
    key: str
    label: str | None = None
    total_imports: int = Field(..., ge=0)
    total_quantity: float
    total_value: float
    total_emissions: float


class DashboardResponse(BaseModel):
    stats: DashboardStatsResponse
    recent_declarations: list[DeclarationResponse]
    sector_stats: list[GroupTotalsResponse]
    country_stats: list[GroupTotalsResponse]
    monthly_trends: list[GroupTotalsResponse]
