"""
tests/test_import_rules.py

Pytest unit tests for ledger.imports: field guards and derived figures of
a single import line.

Coverage
--------
- Candidate validation, first offending field reported
- Partial update validation (None means unchanged, unknown fields rejected)
- Document metadata validation
- Total value computation and reconciliation tolerance
- Certificates required / deficit / compliance
- Required documents and line_problems
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

import pytest

from ledger.errors import FieldValidationError
from ledger.imports import (
    DocumentCandidate,
    ImportLineCandidate,
    certificate_deficit,
    certificates_required,
    compute_total_value,
    has_required_documents,
    is_compliant,
    line_problems,
    reconcile_total_value,
    validate_candidate,
    validate_changes,
    validate_document,
)
from ledger.vocabulary import DocumentType


def _candidate(**overrides) -> ImportLineCandidate:
    values = {
        "product_id": uuid.uuid4(),
        "supplier_name": "Anhui Steel Works",
        "supplier_country": "China",
        "quantity": 10.0,
        "unit_value": 100.0,
        "carbon_emissions": 5.0,
    }
    values.update(overrides)
    return ImportLineCandidate(**values)


@dataclass
class _Document:
    document_type: str


@dataclass
class _Line:
    quantity: float = 10.0
    unit_value: float = 100.0
    carbon_emissions: float = 5.0
    carbon_certificates: float | None = None
    documents: list[_Document] = field(default_factory=list)


# ---------------------------------------------------------------------------
# validate_candidate
# ---------------------------------------------------------------------------


class TestValidateCandidate:
    def test_valid_candidate_passes(self) -> None:
        validate_candidate(_candidate(carbon_certificates=3.0, notes="first batch"))

    def test_zero_emissions_allowed(self) -> None:
        validate_candidate(_candidate(carbon_emissions=0.0))

    @pytest.mark.parametrize(
        ("overrides", "field_name"),
        [
            ({"quantity": 0.0}, "quantity"),
            ({"quantity": 1_000_001.0}, "quantity"),
            ({"unit_value": -1.0}, "unit_value"),
            ({"carbon_emissions": -0.1}, "carbon_emissions"),
            ({"carbon_certificates": -2.0}, "carbon_certificates"),
            ({"supplier_name": "   "}, "supplier_name"),
            ({"supplier_country": ""}, "supplier_country"),
            ({"supplier_name": "x" * 201}, "supplier_name"),
            ({"notes": "n" * 1001}, "notes"),
        ],
    )
    def test_reports_offending_field(self, overrides: dict, field_name: str) -> None:
        with pytest.raises(FieldValidationError) as excinfo:
            validate_candidate(_candidate(**overrides))
        assert excinfo.value.field == field_name

    def test_numeric_fields_checked_before_text(self) -> None:
        with pytest.raises(FieldValidationError) as excinfo:
            validate_candidate(_candidate(quantity=-1.0, supplier_name=""))
        assert excinfo.value.field == "quantity"


# ---------------------------------------------------------------------------
# validate_changes
# ---------------------------------------------------------------------------


class TestValidateChanges:
    def test_drops_none_values(self) -> None:
        cleaned = validate_changes({"quantity": 20.0, "notes": None})
        assert cleaned == {"quantity": 20.0}

    def test_rejects_unknown_field(self) -> None:
        with pytest.raises(FieldValidationError) as excinfo:
            validate_changes({"product_id": uuid.uuid4()})
        assert excinfo.value.field == "product_id"

    def test_rejects_unknown_status(self) -> None:
        with pytest.raises(FieldValidationError) as excinfo:
            validate_changes({"status": "archived"})
        assert excinfo.value.field == "status"

    def test_accepts_known_status(self) -> None:
        assert validate_changes({"status": "completed"}) == {"status": "completed"}


# ---------------------------------------------------------------------------
# validate_document
# ---------------------------------------------------------------------------


class TestValidateDocument:
    def test_valid_document(self) -> None:
        validate_document(
            DocumentCandidate(name="invoice.pdf", document_type="invoice", url="s3://bucket/a", size_bytes=10)
        )

    def test_rejects_unknown_type(self) -> None:
        with pytest.raises(FieldValidationError) as excinfo:
            validate_document(
                DocumentCandidate(name="x.pdf", document_type="photo", url="s3://bucket/a", size_bytes=1)
            )
        assert excinfo.value.field == "document_type"

    def test_rejects_negative_size(self) -> None:
        with pytest.raises(FieldValidationError) as excinfo:
            validate_document(
                DocumentCandidate(name="x.pdf", document_type="other", url="s3://bucket/a", size_bytes=-1)
            )
        assert excinfo.value.field == "size_bytes"


# ---------------------------------------------------------------------------
# Derived figures
# ---------------------------------------------------------------------------


class TestDerivedFigures:
    def test_total_value(self) -> None:
        assert compute_total_value(10.0, 100.0) == pytest.approx(1000.0)

    def test_reconcile_keeps_value_within_tolerance(self) -> None:
        assert reconcile_total_value(1000.005, 10.0, 100.0) == 1000.005

    def test_reconcile_replaces_mismatch(self) -> None:
        assert reconcile_total_value(999.0, 10.0, 100.0) == pytest.approx(1000.0)

    def test_reconcile_fills_missing(self) -> None:
        assert reconcile_total_value(None, 2.0, 3.5) == pytest.approx(7.0)

    def test_certificates_required_rounds_up(self) -> None:
        assert certificates_required(12.3) == 13
        assert certificates_required(12.0) == 12
        assert certificates_required(0.0) == 0

    def test_deficit(self) -> None:
        assert certificate_deficit(12.3, 10.0) == 3
        assert certificate_deficit(12.3, None) == 13
        assert certificate_deficit(5.0, 8.0) == 0

    def test_compliance(self) -> None:
        assert is_compliant(4.2, 5.0)
        assert not is_compliant(4.2, 4.2)


# ---------------------------------------------------------------------------
# Documents and line_problems
# ---------------------------------------------------------------------------


class TestLineProblems:
    def test_required_documents(self) -> None:
        assert has_required_documents([DocumentType.INVOICE, DocumentType.CERTIFICATE, DocumentType.OTHER])
        assert not has_required_documents([DocumentType.INVOICE, DocumentType.CUSTOMS])

    def test_complete_line_has_no_problems(self) -> None:
        line = _Line(documents=[_Document("invoice"), _Document("certificate")])
        assert line_problems(line) == []

    def test_missing_documents_reported(self) -> None:
        problems = line_problems(_Line(documents=[_Document("invoice")]))
        assert problems == ["An invoice and an emissions certificate are required."]

    def test_bad_figures_reported(self) -> None:
        line = _Line(quantity=0.0, carbon_certificates=-1.0, documents=[])
        problems = line_problems(line)
        assert "Quantity must be greater than 0." in problems
        assert "Carbon certificates must not be negative." in problems
        assert len(problems) == 3
