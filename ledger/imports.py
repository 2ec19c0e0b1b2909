"""
ledger/imports.py

Validation and derived figures for a single import line.

No database logic lives here. Callers hand in values already coerced to
the right Python types; the guards below only enforce business ranges.

Formulas
--------
total_value            = quantity * unit_value
certificates_required  = ceil(carbon_emissions)        (1 certificate = 1 tCO2e)
certificate_deficit    = max(0, required - held)
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ledger.errors import FieldValidationError
from ledger.vocabulary import DocumentType, ImportStatus

MAX_QUANTITY = 1_000_000.0
MAX_UNIT_VALUE = 1_000_000.0
MAX_EMISSIONS = 1_000_000.0
MAX_CERTIFICATES = 1_000_000.0

MAX_SUPPLIER_NAME_LENGTH = 200
MAX_SUPPLIER_COUNTRY_LENGTH = 100
MAX_NOTES_LENGTH = 1000
MAX_DOCUMENT_NAME_LENGTH = 255

TOTAL_VALUE_TOLERANCE = 0.01

REQUIRED_DOCUMENT_TYPES = (DocumentType.INVOICE, DocumentType.CERTIFICATE)

# Fields an update request may carry.
UPDATABLE_FIELDS = frozenset(
    {
        "supplier_name",
        "supplier_country",
        "quantity",
        "unit_value",
        "carbon_emissions",
        "carbon_certificates",
        "notes",
        "status",
    }
)


@dataclass(frozen=True)
class ImportLineCandidate:
    """
    Field values for a new import line.

    ``total_value`` may be supplied by a client form but is never trusted:
    the stored value is always recomputed from quantity and unit value.
    """

    product_id: uuid.UUID
    supplier_name: str
    supplier_country: str
    quantity: float
    unit_value: float
    carbon_emissions: float
    carbon_certificates: float | None = None
    notes: str | None = None
    total_value: float | None = None


@dataclass(frozen=True)
class DocumentCandidate:
    """Metadata of one document attached to an import line."""

    name: str
    document_type: str
    url: str
    size_bytes: int


# ---------------------------------------------------------------------------
# Field guards
# ---------------------------------------------------------------------------


def _check_positive(field: str, value: float, upper: float) -> None:
    if not value > 0:
        raise FieldValidationError(field, f"{field} must be greater than 0.")
    if value > upper:
        raise FieldValidationError(field, f"{field} must not exceed {upper:,.0f}.")


def _check_non_negative(field: str, value: float, upper: float) -> None:
    if not value >= 0:
        raise FieldValidationError(field, f"{field} must not be negative.")
    if value > upper:
        raise FieldValidationError(field, f"{field} must not exceed {upper:,.0f}.")


def _check_text(field: str, value: str | None, max_length: int, *, required: bool) -> None:
    if value is None or not value.strip():
        if required:
            raise FieldValidationError(field, f"{field} is required.")
        return
    if len(value.strip()) > max_length:
        raise FieldValidationError(field, f"{field} must be at most {max_length} characters.")


def _check_field(field: str, value: Any) -> None:
    if field == "quantity":
        _check_positive(field, value, MAX_QUANTITY)
    elif field == "unit_value":
        _check_positive(field, value, MAX_UNIT_VALUE)
    elif field == "carbon_emissions":
        _check_non_negative(field, value, MAX_EMISSIONS)
    elif field == "carbon_certificates":
        if value is not None:
            _check_non_negative(field, value, MAX_CERTIFICATES)
    elif field == "supplier_name":
        _check_text(field, value, MAX_SUPPLIER_NAME_LENGTH, required=True)
    elif field == "supplier_country":
        _check_text(field, value, MAX_SUPPLIER_COUNTRY_LENGTH, required=True)
    elif field == "notes":
        _check_text(field, value, MAX_NOTES_LENGTH, required=False)
    elif field == "status":
        if value not in ImportStatus.ALL:
            raise FieldValidationError(field, f"status must be one of {list(ImportStatus.ALL)}.")
    else:
        raise FieldValidationError(field, f"{field} cannot be changed.")


def validate_candidate(candidate: ImportLineCandidate) -> None:
    """
    Raise FieldValidationError naming the first offending field.

    Numeric ranges are checked before free-text fields.
    """

    for field in (
        "quantity",
        "unit_value",
        "carbon_emissions",
        "carbon_certificates",
        "supplier_name",
        "supplier_country",
        "notes",
    ):
        _check_field(field, getattr(candidate, field))


def validate_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate a partial update and return only the fields that carry a value.

    ``None`` means "leave unchanged" for every field.
    """

    cleaned = {field: value for field, value in changes.items() if value is not None}
    for field, value in cleaned.items():
        _check_field(field, value)
    return cleaned


def validate_document(candidate: DocumentCandidate) -> None:
    _check_text("name", candidate.name, MAX_DOCUMENT_NAME_LENGTH, required=True)
    if candidate.document_type not in DocumentType.ALL:
        raise FieldValidationError(
            "document_type",
            f"document_type must be one of {list(DocumentType.ALL)}.",
        )
    _check_text("url", candidate.url, 2048, required=True)
    if candidate.size_bytes < 0:
        raise FieldValidationError("size_bytes", "size_bytes must not be negative.")


# ---------------------------------------------------------------------------
# Derived figures
# ---------------------------------------------------------------------------


def compute_total_value(quantity: float, unit_value: float) -> float:
    return quantity * unit_value


def reconcile_total_value(total_value: float | None, quantity: float, unit_value: float) -> float:
    """
    Return ``total_value`` when it matches quantity * unit_value within the
    tolerance, otherwise the recomputed product.
    """

    expected = compute_total_value(quantity, unit_value)
    if total_value is None or abs(total_value - expected) > TOTAL_VALUE_TOLERANCE:
        return expected
    return total_value


def certificates_required(carbon_emissions: float) -> int:
    return math.ceil(carbon_emissions)


def certificate_deficit(carbon_emissions: float, carbon_certificates: float | None) -> float:
    held = carbon_certificates or 0
    return max(0, certificates_required(carbon_emissions) - held)


def is_compliant(carbon_emissions: float, carbon_certificates: float | None) -> bool:
    return certificate_deficit(carbon_emissions, carbon_certificates) == 0


def has_required_documents(document_types: Iterable[str]) -> bool:
    present = set(document_types)
    return all(required in present for required in REQUIRED_DOCUMENT_TYPES)


def line_problems(line: Any) -> list[str]:
    """
    Business-rule problems of a stored line, as human-readable messages.

    ``line`` is any object exposing the import-line attributes and a
    ``documents`` collection whose items carry ``document_type``.
    """

    problems: list[str] = []
    if not line.quantity > 0:
        problems.append("Quantity must be greater than 0.")
    if not line.unit_value > 0:
        problems.append("Unit value must be greater than 0.")
    if not line.carbon_emissions >= 0:
        problems.append("Carbon emissions must not be negative.")
    if line.carbon_certificates is not None and not line.carbon_certificates >= 0:
        problems.append("Carbon certificates must not be negative.")
    if not has_required_documents(document.document_type for document in line.documents):
        problems.append("An invoice and an emissions certificate are required.")
    return problems
