"""
ledger/workflow.py

Declaration status state machine.

    draft     --submit()-------> submitted
    submitted --validate()-----> validated   (terminal)
    submitted --reject(reason)-> rejected
    rejected  --reopen()-------> draft

Only draft and rejected declarations are editable. The functions mutate
any object exposing ``status``, ``total_imports`` and the timestamp /
reason attributes; persistence is the caller's job.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ledger.errors import (
    CannotSubmitError,
    DeclarationNotEditableError,
    FieldValidationError,
    InvalidTransitionError,
)
from ledger.vocabulary import DeclarationStatus

EDITABLE_STATUSES = frozenset({DeclarationStatus.DRAFT, DeclarationStatus.REJECTED})

MAX_REJECTION_REASON_LENGTH = 1000
MAX_NOTES_LENGTH = 2000


def can_edit(status: str) -> bool:
    return status in EDITABLE_STATUSES


def can_submit(status: str, total_imports: int) -> bool:
    return status == DeclarationStatus.DRAFT and total_imports > 0


def ensure_editable(declaration: Any) -> None:
    if not can_edit(declaration.status):
        raise DeclarationNotEditableError(
            f"Declaration in status {declaration.status!r} cannot be modified."
        )


def submit(declaration: Any, *, now: datetime) -> None:
    if not can_submit(declaration.status, declaration.total_imports):
        if declaration.status == DeclarationStatus.DRAFT:
            raise CannotSubmitError("Declaration has no import lines to submit.")
        raise CannotSubmitError(
            f"Only draft declarations can be submitted (current status {declaration.status!r})."
        )
    declaration.status = DeclarationStatus.SUBMITTED
    declaration.submitted_at = now


def validate(declaration: Any, *, now: datetime) -> None:
    if declaration.status != DeclarationStatus.SUBMITTED:
        raise InvalidTransitionError("Only submitted declarations can be validated.")
    declaration.status = DeclarationStatus.VALIDATED
    declaration.validated_at = now


def reject(declaration: Any, reason: str, *, now: datetime) -> None:
    if declaration.status != DeclarationStatus.SUBMITTED:
        raise InvalidTransitionError("Only submitted declarations can be rejected.")
    cleaned = (reason or "").strip()
    if not cleaned:
        raise FieldValidationError("rejection_reason", "A rejection reason is required.")
    if len(cleaned) > MAX_REJECTION_REASON_LENGTH:
        raise FieldValidationError(
            "rejection_reason",
            f"rejection_reason must be at most {MAX_REJECTION_REASON_LENGTH} characters.",
        )
    declaration.status = DeclarationStatus.REJECTED
    declaration.rejected_at = now
    declaration.rejection_reason = cleaned


def reopen(declaration: Any) -> None:
    if declaration.status != DeclarationStatus.REJECTED:
        raise InvalidTransitionError("Only rejected declarations can return to draft.")
    declaration.status = DeclarationStatus.DRAFT
    declaration.rejected_at = None
    declaration.rejection_reason = None


def request_status(declaration: Any, target: str, *, now: datetime) -> None:
    """
    Apply a status change requested through a plain "set status" update.

    Requesting the current status changes nothing. Otherwise only
    ``submitted`` (submit) and ``draft`` (reopen a rejected declaration) can
    be requested this way; validation and rejection have dedicated review
    operations.
    """

    if target == declaration.status:
        return
    if target == DeclarationStatus.SUBMITTED:
        submit(declaration, now=now)
    elif target == DeclarationStatus.DRAFT:
        reopen(declaration)
    else:
        raise InvalidTransitionError(
            f"Status change {declaration.status!r} -> {target!r} is not allowed."
        )


def validate_notes(notes: str | None) -> str | None:
    if notes is None:
        return None
    cleaned = notes.strip()
    if len(cleaned) > MAX_NOTES_LENGTH:
        raise FieldValidationError("notes", f"notes must be at most {MAX_NOTES_LENGTH} characters.")
    return cleaned
