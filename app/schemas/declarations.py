"""
app/schemas/declarations.py

Request and response schemas for declaration endpoints.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from app.schemas.common import PaginationResponse, VersionedRequest
from app.schemas.imports import ImportLineResponse
from db.models.declaration import CbamDeclaration


class DeclarationCreateRequest(BaseModel):
    year: int
    quarter: int
    notes: str | None = None


class DeclarationUpdateRequest(VersionedRequest):
    notes: str | None = None
    status: str | None = None


class DeclarationRejectRequest(VersionedRequest):
    reason: str


class DeclarationSummaryResponse(BaseModel):
    total_imports: int = Field(..., ge=0)
    total_quantity: float
    total_value: float
    total_emissions: float
    total_certificates_required: float
    total_certificates_held: float
    certificate_deficit: float


class DeclarationResponse(BaseModel):
    """
    API response model for one declaration, with its derived read fields.
    """

    id: uuid.UUID
    account_id: uuid.UUID
    reporting_year: int
    reporting_quarter: int
    period_label: str
    status: str
    status_label: str
    summary: DeclarationSummaryResponse
    deadline_date: date
    days_until_deadline: int
    is_overdue: bool
    can_edit: bool
    can_submit: bool
    submitted_at: datetime | None = None
    validated_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    notes: str | None = None
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, declaration: CbamDeclaration, *, today: date) -> "DeclarationResponse":
        summary = declaration.summary
        return cls(
            id=declaration.id,
            account_id=declaration.account_id,
            reporting_year=declaration.reporting_year,
            reporting_quarter=declaration.reporting_quarter,
            period_label=declaration.period_label,
            status=declaration.status,
            status_label=declaration.status_label,
            summary=DeclarationSummaryResponse(
                **summary.as_dict(),
                certificate_deficit=summary.certificate_deficit,
            ),
            deadline_date=declaration.deadline_date,
            days_until_deadline=declaration.days_until_deadline(today),
            is_overdue=declaration.is_overdue(today),
            can_edit=declaration.can_edit,
            can_submit=declaration.can_submit,
            submitted_at=declaration.submitted_at,
            validated_at=declaration.validated_at,
            rejected_at=declaration.rejected_at,
            rejection_reason=declaration.rejection_reason,
            notes=declaration.notes,
            version=declaration.version,
            created_at=declaration.created_at,
            updated_at=declaration.updated_at,
        )


class DeclarationDetailResponse(DeclarationResponse):
    imports: list[ImportLineResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, declaration: CbamDeclaration, *, today: date) -> "DeclarationDetailResponse":
        base = DeclarationResponse.from_model(declaration, today=today)
        return cls(
            **base.model_dump(),
            imports=[ImportLineResponse.from_model(line) for line in declaration.imports],
        )


class DeclarationListResponse(BaseModel):
    items: list[DeclarationResponse]
    pagination: PaginationResponse
