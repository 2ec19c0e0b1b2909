"""
app/api/routers/suppliers.py

Supplier directory endpoints scoped to the calling account.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_account_id
from app.api.errors import to_http_exception
from app.schemas.common import PaginationResponse
from app.schemas.suppliers import (
    IntensityEntryResponse,
    IntensityRequest,
    SupplierCreateRequest,
    SupplierListResponse,
    SupplierResponse,
    SupplierUpdateRequest,
    SupplierVerificationRequest,
)
from app.services.supplier_service import SupplierDetails, SupplierService, get_supplier_service
from db.models.supplier import Supplier
from db.repositories.types import SupplierFilters
from db.session import get_db
from ledger.errors import LedgerError

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


def _to_response(supplier: Supplier, service: SupplierService) -> SupplierResponse:
    return SupplierResponse(
        id=supplier.id,
        name=supplier.name,
        country=supplier.country,
        address=supplier.address,
        contact_email=supplier.contact_email,
        contact_phone=supplier.contact_phone,
        registration_number=supplier.registration_number,
        full_address=supplier.full_address,
        contact_info=supplier.contact_info,
        is_verified=supplier.is_verified,
        last_verified_at=supplier.last_verified_at,
        carbon_intensity_data=[
            IntensityEntryResponse(
                sector=entry["sector"],
                value=entry["value"],
                verified_at=datetime.fromisoformat(entry["verified_at"]),
                certificate=entry.get("certificate"),
                is_expired=service.is_data_expired(supplier, entry["sector"]),
            )
            for entry in supplier.carbon_intensity_data or []
        ],
        created_at=supplier.created_at,
        updated_at=supplier.updated_at,
    )


@router.get("", response_model=SupplierListResponse)
def list_suppliers(
    country: str | None = Query(default=None),
    is_verified: bool | None = Query(default=None),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort_by: str = Query(default="name"),
    sort_order: Literal["asc", "desc"] = Query(default="asc"),
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: SupplierService = Depends(get_supplier_service),
) -> SupplierListResponse:
    result = service.list_suppliers(
        db=db,
        account_id=account_id,
        filters=SupplierFilters(country=country, is_verified=is_verified, search=search),
        page=page,
        limit=limit,
        sort_by=sort_by,
        descending=sort_order == "desc",
    )
    return SupplierListResponse(
        items=[_to_response(item, service) for item in result.items],
        pagination=PaginationResponse.from_page(result),
    )


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(
    body: SupplierCreateRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: SupplierService = Depends(get_supplier_service),
) -> SupplierResponse:
    """
    Register a supplier.

    Raises HTTP 409 if the account already has a supplier with the same
    name in the same country.
    """
    try:
        supplier = service.create_supplier(
            db=db,
            account_id=account_id,
            details=SupplierDetails(**body.model_dump()),
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_response(supplier, service)


@router.get("/{supplier_id}", response_model=SupplierResponse)
def get_supplier(
    supplier_id: uuid.UUID,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: SupplierService = Depends(get_supplier_service),
) -> SupplierResponse:
    try:
        supplier = service.get_supplier(db=db, account_id=account_id, supplier_id=supplier_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_response(supplier, service)


@router.patch("/{supplier_id}", response_model=SupplierResponse)
def update_supplier(
    supplier_id: uuid.UUID,
    body: SupplierUpdateRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: SupplierService = Depends(get_supplier_service),
) -> SupplierResponse:
    try:
        supplier = service.update_supplier(
            db=db,
            account_id=account_id,
            supplier_id=supplier_id,
            changes=body.model_dump(exclude_none=True),
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_response(supplier, service)


@router.post("/{supplier_id}/verification", response_model=SupplierResponse)
def set_verification(
    supplier_id: uuid.UUID,
    body: SupplierVerificationRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: SupplierService = Depends(get_supplier_service),
) -> SupplierResponse:
    try:
        supplier = service.set_verified(
            db=db,
            account_id=account_id,
            supplier_id=supplier_id,
            verified=body.verified,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_response(supplier, service)


@router.put("/{supplier_id}/intensity/{sector}", response_model=SupplierResponse)
def upsert_intensity(
    supplier_id: uuid.UUID,
    sector: str,
    body: IntensityRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: SupplierService = Depends(get_supplier_service),
) -> SupplierResponse:
    try:
        supplier = service.upsert_intensity(
            db=db,
            account_id=account_id,
            supplier_id=supplier_id,
            sector=sector,
            value=body.value,
            certificate=body.certificate,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_response(supplier, service)


@router.delete("/{supplier_id}/intensity/{sector}", response_model=SupplierResponse)
def remove_intensity(
    supplier_id: uuid.UUID,
    sector: str,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: SupplierService = Depends(get_supplier_service),
) -> SupplierResponse:
    try:
        supplier = service.remove_intensity(
            db=db,
            account_id=account_id,
            supplier_id=supplier_id,
            sector=sector,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return _to_response(supplier, service)


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplier(
    supplier_id: uuid.UUID,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: SupplierService = Depends(get_supplier_service),
) -> Response:
    try:
        service.delete_supplier(db=db, account_id=account_id, supplier_id=supplier_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
