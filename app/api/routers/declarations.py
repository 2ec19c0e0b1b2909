"""
app/api/routers/declarations.py

Declaration endpoints: CRUD plus the submit / validate / reject workflow.
"""

from __future__ import annotations

import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_account_id
from app.api.errors import to_http_exception
from app.schemas.common import PaginationResponse, VersionedRequest
from app.schemas.declarations import (
    DeclarationCreateRequest,
    DeclarationDetailResponse,
    DeclarationListResponse,
    DeclarationRejectRequest,
    DeclarationResponse,
    DeclarationUpdateRequest,
)
from app.services.declaration_service import DeclarationService, get_declaration_service
from db.repositories.types import DeclarationFilters
from db.session import get_db
from ledger.errors import LedgerError

router = APIRouter(prefix="/declarations", tags=["declarations"])


@router.post("", response_model=DeclarationResponse, status_code=status.HTTP_201_CREATED)
def create_declaration(
    body: DeclarationCreateRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> DeclarationResponse:
    """
    Open a draft declaration for one reporting period.

    Raises HTTP 409 if the account already has a declaration for the period.
    """
    try:
        declaration = service.create_declaration(
            db=db,
            account_id=account_id,
            year=body.year,
            quarter=body.quarter,
            notes=body.notes,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return DeclarationResponse.from_model(declaration, today=service.now().date())


@router.get("", response_model=DeclarationListResponse)
def list_declarations(
    status_filter: str | None = Query(default=None, alias="status"),
    year: int | None = Query(default=None),
    quarter: int | None = Query(default=None),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort_by: str = Query(default="created_at"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> DeclarationListResponse:
    try:
        result = service.list_declarations(
            db=db,
            account_id=account_id,
            filters=DeclarationFilters(status=status_filter, year=year, quarter=quarter, search=search),
            page=page,
            limit=limit,
            sort_by=sort_by,
            descending=sort_order == "desc",
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

    today = service.now().date()
    return DeclarationListResponse(
        items=[DeclarationResponse.from_model(item, today=today) for item in result.items],
        pagination=PaginationResponse.from_page(result),
    )


@router.get("/pending-deadlines", response_model=list[DeclarationResponse])
def pending_deadlines(
    days_ahead: int | None = Query(default=None, ge=0),
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> list[DeclarationResponse]:
    """
    Draft or pending declarations whose deadline falls within the window.
    """
    declarations = service.find_pending_deadlines(db=db, account_id=account_id, days_ahead=days_ahead)
    today = service.now().date()
    return [DeclarationResponse.from_model(item, today=today) for item in declarations]


@router.get("/{declaration_id}", response_model=DeclarationDetailResponse)
def get_declaration(
    declaration_id: uuid.UUID,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> DeclarationDetailResponse:
    try:
        declaration = service.get_declaration(db=db, account_id=account_id, declaration_id=declaration_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return DeclarationDetailResponse.from_model(declaration, today=service.now().date())


@router.patch("/{declaration_id}", response_model=DeclarationResponse)
def update_declaration(
    declaration_id: uuid.UUID,
    body: DeclarationUpdateRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> DeclarationResponse:
    """
    Update notes and/or request ``submitted`` or ``draft``.
    """
    try:
        declaration = service.update_declaration(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            notes=body.notes,
            status=body.status,
            expected_version=body.expected_version,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return DeclarationResponse.from_model(declaration, today=service.now().date())


@router.post("/{declaration_id}/submit", response_model=DeclarationResponse)
def submit_declaration(
    declaration_id: uuid.UUID,
    body: VersionedRequest | None = None,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> DeclarationResponse:
    try:
        declaration = service.submit(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            expected_version=body.expected_version if body else None,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return DeclarationResponse.from_model(declaration, today=service.now().date())


@router.post("/{declaration_id}/validate", response_model=DeclarationResponse)
def validate_declaration(
    declaration_id: uuid.UUID,
    body: VersionedRequest | None = None,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> DeclarationResponse:
    try:
        declaration = service.validate(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            expected_version=body.expected_version if body else None,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return DeclarationResponse.from_model(declaration, today=service.now().date())


@router.post("/{declaration_id}/reject", response_model=DeclarationResponse)
def reject_declaration(
    declaration_id: uuid.UUID,
    body: DeclarationRejectRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> DeclarationResponse:
    try:
        declaration = service.reject(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            reason=body.reason,
            expected_version=body.expected_version,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return DeclarationResponse.from_model(declaration, today=service.now().date())


@router.delete("/{declaration_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_declaration(
    declaration_id: uuid.UUID,
    expected_version: int | None = Query(default=None, ge=1),
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: DeclarationService = Depends(get_declaration_service),
) -> Response:
    """
    Delete a draft or rejected declaration together with its import lines.
    """
    try:
        service.delete_declaration(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            expected_version=expected_version,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
