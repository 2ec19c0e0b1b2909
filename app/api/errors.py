"""
app/api/errors.py

Maps ledger errors onto HTTP responses.

    FieldValidationError, InvalidPeriodError                 -> 422
    NotFoundError, ProductNotFoundError                      -> 404
    DuplicatePeriodError, DuplicateSupplierError,
    ConcurrencyConflictError                                 -> 409
    DeclarationNotEditableError, CannotSubmitError,
    InvalidTransitionError                                   -> 400
"""

from __future__ import annotations

from fastapi import HTTPException, status

from ledger.errors import (
    CannotSubmitError,
    ConcurrencyConflictError,
    DeclarationNotEditableError,
    DuplicatePeriodError,
    DuplicateSupplierError,
    FieldValidationError,
    InvalidPeriodError,
    InvalidTransitionError,
    LedgerError,
    NotFoundError,
    ProductNotFoundError,
)

_STATUS_BY_ERROR: tuple[tuple[type[LedgerError], int], ...] = (
    (FieldValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidPeriodError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ProductNotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicatePeriodError, status.HTTP_409_CONFLICT),
    (DuplicateSupplierError, status.HTTP_409_CONFLICT),
    (ConcurrencyConflictError, status.HTTP_409_CONFLICT),
    (DeclarationNotEditableError, status.HTTP_400_BAD_REQUEST),
    (CannotSubmitError, status.HTTP_400_BAD_REQUEST),
    (InvalidTransitionError, status.HTTP_400_BAD_REQUEST),
)


def status_for(exc: LedgerError) -> int:
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def to_http_exception(exc: LedgerError) -> HTTPException:
    """
    Build the HTTPException for a ledger error; detail is
    ``{"error": code, "message": str, "field"?: str}``.
    """

    return HTTPException(status_code=status_for(exc), detail=exc.to_dict())
