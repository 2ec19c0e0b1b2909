"""
tests/test_workflow.py

Pytest unit tests for the declaration status state machine (ledger.workflow).

Coverage
--------
- Editable statuses
- submit: draft with lines only
- validate / reject: submitted only, reason required
- reopen: rejected back to draft
- request_status: allowed and refused targets
- Notes validation
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from ledger import workflow
from ledger.errors import (
    CannotSubmitError,
    DeclarationNotEditableError,
    FieldValidationError,
    InvalidTransitionError,
)
from ledger.vocabulary import DeclarationStatus

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _declaration(status: str = DeclarationStatus.DRAFT, total_imports: int = 1) -> SimpleNamespace:
    return SimpleNamespace(
        status=status,
        total_imports=total_imports,
        submitted_at=None,
        validated_at=None,
        rejected_at=None,
        rejection_reason=None,
    )


# ---------------------------------------------------------------------------
# Editability
# ---------------------------------------------------------------------------


class TestEditable:
    @pytest.mark.parametrize("status", [DeclarationStatus.DRAFT, DeclarationStatus.REJECTED])
    def test_editable(self, status: str) -> None:
        assert workflow.can_edit(status)
        workflow.ensure_editable(_declaration(status))

    @pytest.mark.parametrize(
        "status",
        [DeclarationStatus.SUBMITTED, DeclarationStatus.VALIDATED, DeclarationStatus.PENDING],
    )
    def test_not_editable(self, status: str) -> None:
        assert not workflow.can_edit(status)
        with pytest.raises(DeclarationNotEditableError):
            workflow.ensure_editable(_declaration(status))


# ---------------------------------------------------------------------------
# submit
# ---------------------------------------------------------------------------


class TestSubmit:
    def test_draft_with_lines(self) -> None:
        declaration = _declaration()
        workflow.submit(declaration, now=NOW)
        assert declaration.status == DeclarationStatus.SUBMITTED
        assert declaration.submitted_at == NOW

    def test_draft_without_lines(self) -> None:
        declaration = _declaration(total_imports=0)
        with pytest.raises(CannotSubmitError, match="no import lines"):
            workflow.submit(declaration, now=NOW)
        assert declaration.status == DeclarationStatus.DRAFT
        assert declaration.submitted_at is None

    def test_rejected_cannot_be_submitted_directly(self) -> None:
        with pytest.raises(CannotSubmitError):
            workflow.submit(_declaration(DeclarationStatus.REJECTED), now=NOW)


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


class TestReview:
    def test_validate(self) -> None:
        declaration = _declaration(DeclarationStatus.SUBMITTED)
        workflow.validate(declaration, now=NOW)
        assert declaration.status == DeclarationStatus.VALIDATED
        assert declaration.validated_at == NOW

    def test_validate_requires_submitted(self) -> None:
        with pytest.raises(InvalidTransitionError):
            workflow.validate(_declaration(DeclarationStatus.DRAFT), now=NOW)

    def test_reject(self) -> None:
        declaration = _declaration(DeclarationStatus.SUBMITTED)
        workflow.reject(declaration, "  Missing invoices  ", now=NOW)
        assert declaration.status == DeclarationStatus.REJECTED
        assert declaration.rejection_reason == "Missing invoices"
        assert declaration.rejected_at == NOW

    def test_reject_requires_reason(self) -> None:
        declaration = _declaration(DeclarationStatus.SUBMITTED)
        with pytest.raises(FieldValidationError) as excinfo:
            workflow.reject(declaration, "   ", now=NOW)
        assert excinfo.value.field == "rejection_reason"
        assert declaration.status == DeclarationStatus.SUBMITTED

    def test_validated_is_terminal(self) -> None:
        declaration = _declaration(DeclarationStatus.VALIDATED)
        with pytest.raises(InvalidTransitionError):
            workflow.reject(declaration, "late", now=NOW)
        with pytest.raises(InvalidTransitionError):
            workflow.reopen(declaration)

    def test_reopen_clears_rejection(self) -> None:
        declaration = _declaration(DeclarationStatus.SUBMITTED)
        workflow.reject(declaration, "wrong figures", now=NOW)
        workflow.reopen(declaration)
        assert declaration.status == DeclarationStatus.DRAFT
        assert declaration.rejection_reason is None
        assert declaration.rejected_at is None


# ---------------------------------------------------------------------------
# request_status
# ---------------------------------------------------------------------------


class TestRequestStatus:
    def test_submitted_submits(self) -> None:
        declaration = _declaration()
        workflow.request_status(declaration, DeclarationStatus.SUBMITTED, now=NOW)
        assert declaration.status == DeclarationStatus.SUBMITTED

    def test_draft_reopens_rejected(self) -> None:
        declaration = _declaration(DeclarationStatus.REJECTED)
        workflow.request_status(declaration, DeclarationStatus.DRAFT, now=NOW)
        assert declaration.status == DeclarationStatus.DRAFT

    @pytest.mark.parametrize("target", [DeclarationStatus.VALIDATED, DeclarationStatus.PENDING, "archived"])
    def test_refused_targets(self, target: str) -> None:
        with pytest.raises(InvalidTransitionError):
            workflow.request_status(_declaration(), target, now=NOW)

    @pytest.mark.parametrize("status", [DeclarationStatus.DRAFT, DeclarationStatus.REJECTED])
    def test_same_status_is_noop(self, status: str) -> None:
        declaration = _declaration(status)
        workflow.request_status(declaration, status, now=NOW)
        assert declaration.status == status
        assert declaration.submitted_at is None


class TestNotes:
    def test_strips(self) -> None:
        assert workflow.validate_notes("  hello ") == "hello"

    def test_none_passes_through(self) -> None:
        assert workflow.validate_notes(None) is None

    def test_too_long(self) -> None:
        with pytest.raises(FieldValidationError):
            workflow.validate_notes("x" * 2001)
