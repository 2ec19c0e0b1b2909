"""
ledger/errors.py

Typed failures raised by the declaration ledger.

Every error is recoverable and carries a stable ``code`` that the HTTP
boundary renders; nothing here is fatal to the process.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for every declaration ledger failure."""

    code = "ledger_error"

    def to_dict(self) -> dict[str, object]:
        return {"error": self.code, "message": str(self)}


class FieldValidationError(LedgerError):
    """Raised when a single field value breaks a business rule."""

    code = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["field"] = self.field
        return payload


class InvalidPeriodError(LedgerError):
    """Raised when a (year, quarter) pair is outside the accepted range."""

    code = "invalid_period"


class DeclarationNotEditableError(LedgerError):
    """Raised when mutating a declaration outside draft/rejected."""

    code = "declaration_not_editable"


class CannotSubmitError(LedgerError):
    """Raised when submit() is requested for a declaration that cannot be submitted."""

    code = "cannot_submit"


class InvalidTransitionError(LedgerError):
    """Raised for any status change the workflow does not allow."""

    code = "invalid_transition"


class DuplicatePeriodError(LedgerError):
    """Raised when an account already has a declaration for the period."""

    code = "duplicate_period"


class DuplicateSupplierError(LedgerError):
    """Raised when an account already registered a supplier with that name and country."""

    code = "duplicate_supplier"


class ProductNotFoundError(LedgerError):
    """Raised when an import line references a missing or inactive product."""

    code = "product_not_found"


class NotFoundError(LedgerError):
    """Raised when an entity is absent or not owned by the caller."""

    code = "not_found"

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier


class ConcurrencyConflictError(LedgerError):
    """Raised when a declaration changed underneath the caller; retry with fresh state."""

    code = "concurrency_conflict"
