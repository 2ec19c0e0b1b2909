"""
Declaration ledger core: periods, import-line rules, summary aggregation
and the declaration workflow.
"""

from ledger.deadlines import deadline_for, next_regulatory_deadline, period_label, validate_period
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
from ledger.summary import DeclarationSummary, summarize
from ledger.vocabulary import DeclarationStatus, DocumentType, ImportStatus, Sector

__all__ = [
    "CannotSubmitError",
    "ConcurrencyConflictError",
    "DeclarationNotEditableError",
    "DeclarationStatus",
    "DeclarationSummary",
    "DocumentType",
    "DuplicatePeriodError",
    "DuplicateSupplierError",
    "FieldValidationError",
    "ImportStatus",
    "InvalidPeriodError",
    "InvalidTransitionError",
    "LedgerError",
    "NotFoundError",
    "ProductNotFoundError",
    "Sector",
    "deadline_for",
    "next_regulatory_deadline",
    "period_label",
    "summarize",
    "validate_period",
]
