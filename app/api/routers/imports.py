"""
app/api/routers/imports.py

Import line and document metadata endpoints nested under a declaration.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_account_id
from app.api.errors import to_http_exception
from app.schemas.imports import (
    DocumentCreateRequest,
    DocumentResponse,
    ImportLineCreateRequest,
    ImportLineResponse,
    ImportLineUpdateRequest,
    ImportLineValidationResponse,
)
from app.services.import_line_service import ImportLineService, get_import_line_service
from db.session import get_db
from ledger.errors import LedgerError
from ledger.imports import DocumentCandidate, ImportLineCandidate

router = APIRouter(prefix="/declarations/{declaration_id}/imports", tags=["imports"])


@router.get("", response_model=list[ImportLineResponse])
def list_import_lines(
    declaration_id: uuid.UUID,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> list[ImportLineResponse]:
    try:
        lines = service.list_import_lines(db=db, account_id=account_id, declaration_id=declaration_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return [ImportLineResponse.from_model(line) for line in lines]


@router.post("", response_model=ImportLineResponse, status_code=status.HTTP_201_CREATED)
def create_import_line(
    declaration_id: uuid.UUID,
    body: ImportLineCreateRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> ImportLineResponse:
    """
    Add an import line and recompute the declaration summary.
    """
    candidate = ImportLineCandidate(
        product_id=body.product_id,
        supplier_name=body.supplier_name,
        supplier_country=body.supplier_country,
        quantity=body.quantity,
        unit_value=body.unit_value,
        carbon_emissions=body.carbon_emissions,
        carbon_certificates=body.carbon_certificates,
        notes=body.notes,
        total_value=body.total_value,
    )
    try:
        line = service.create_import_line(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            candidate=candidate,
            expected_version=body.expected_version,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return ImportLineResponse.from_model(line)


@router.get("/{import_id}", response_model=ImportLineResponse)
def get_import_line(
    declaration_id: uuid.UUID,
    import_id: uuid.UUID,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> ImportLineResponse:
    try:
        line = service.get_import_line(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            import_id=import_id,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return ImportLineResponse.from_model(line)


@router.patch("/{import_id}", response_model=ImportLineResponse)
def update_import_line(
    declaration_id: uuid.UUID,
    import_id: uuid.UUID,
    body: ImportLineUpdateRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> ImportLineResponse:
    try:
        line = service.update_import_line(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            import_id=import_id,
            changes=body.changes(),
            expected_version=body.expected_version,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return ImportLineResponse.from_model(line)


@router.delete("/{import_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_import_line(
    declaration_id: uuid.UUID,
    import_id: uuid.UUID,
    expected_version: int | None = Query(default=None, ge=1),
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> Response:
    try:
        service.delete_import_line(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            import_id=import_id,
            expected_version=expected_version,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{import_id}/validation", response_model=ImportLineValidationResponse)
def validate_import_line(
    declaration_id: uuid.UUID,
    import_id: uuid.UUID,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> ImportLineValidationResponse:
    """
    Report business-rule problems of a stored line, e.g. missing documents.
    """
    try:
        problems = service.validate_data(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            import_id=import_id,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return ImportLineValidationResponse(import_id=import_id, is_valid=not problems, problems=problems)


@router.post(
    "/{import_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_document(
    declaration_id: uuid.UUID,
    import_id: uuid.UUID,
    body: DocumentCreateRequest,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> DocumentResponse:
    try:
        document = service.add_document(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            import_id=import_id,
            candidate=DocumentCandidate(
                name=body.name,
                document_type=body.document_type,
                url=body.url,
                size_bytes=body.size_bytes,
            ),
            expected_version=body.expected_version,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return DocumentResponse.model_validate(document)


@router.get("/{import_id}/documents", response_model=list[DocumentResponse])
def list_documents(
    declaration_id: uuid.UUID,
    import_id: uuid.UUID,
    document_type: str | None = Query(default=None),
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> list[DocumentResponse]:
    try:
        if document_type is None:
            documents = service.get_import_line(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                import_id=import_id,
            ).documents
        else:
            documents = service.documents_by_type(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                import_id=import_id,
                document_type=document_type,
            )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return [DocumentResponse.model_validate(document) for document in documents]


@router.delete("/{import_id}/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_document(
    declaration_id: uuid.UUID,
    import_id: uuid.UUID,
    document_id: uuid.UUID,
    expected_version: int | None = Query(default=None, ge=1),
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: ImportLineService = Depends(get_import_line_service),
) -> Response:
    try:
        service.remove_document(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            import_id=import_id,
            document_id=document_id,
            expected_version=expected_version,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
