"""
app/services/declaration_service.py

Transactional commands for quarterly CBAM declarations.

Every mutating command follows the same sequence inside one transaction:

    lock declaration -> check version -> guard -> mutate -> flush
    -> recompute summary from the database -> commit

The summary is never adjusted incrementally; ``update_summary`` rebuilds
it from the import lines currently stored for the declaration.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.config import LedgerSettings, get_ledger_settings
from app.services.transactions import ledger_transaction
from db.base import utcnow
from db.models.declaration import CbamDeclaration
from db.repositories.account_repository import AccountRepository
from db.repositories.declaration_repository import DeclarationRepository
from db.repositories.import_line_repository import ImportLineRepository
from db.repositories.types import DeclarationFilters, Page, PageRequest
from ledger import deadlines, workflow
from ledger.errors import ConcurrencyConflictError, DuplicatePeriodError, FieldValidationError
from ledger.summary import EMPTY_SUMMARY, DeclarationSummary, apply_summary, summarize
from ledger.vocabulary import DeclarationStatus

logger = logging.getLogger(__name__)


class DeclarationService:
    """
    Declaration lifecycle: creation, listing, status workflow and deletion.
    """

    def __init__(
        self,
        *,
        settings: LedgerSettings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._settings = settings
        self._clock = clock

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_declaration(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
    ) -> CbamDeclaration:
        return DeclarationRepository(db).get_for_account(account_id, declaration_id)

    def list_declarations(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        filters: DeclarationFilters,
        page: int = 1,
        limit: int | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> Page[CbamDeclaration]:
        if filters.status is not None and filters.status not in DeclarationStatus.ALL:
            raise FieldValidationError("status", f"status must be one of {list(DeclarationStatus.ALL)}.")
        request = PageRequest(
            page=max(1, page),
            limit=self.clamp_limit(limit),
            sort_by=sort_by,
            descending=descending,
        )
        return DeclarationRepository(db).list_for_account(account_id, filters=filters, page=request)

    def find_pending_deadlines(
        self,
        *,
        db: Session,
        account_id: uuid.UUID | None = None,
        days_ahead: int | None = None,
    ) -> list[CbamDeclaration]:
        """
        Draft or pending declarations due within ``days_ahead`` days, soonest first.
        """

        window = self._settings.deadline_window_days if days_ahead is None else days_ahead
        until = self.now().date() + timedelta(days=window)
        return DeclarationRepository(db).find_pending_deadlines(until=until, account_id=account_id)

    def clamp_limit(self, limit: int | None) -> int:
        if limit is None:
            return self._settings.default_page_size
        return max(1, min(limit, self._settings.max_page_size))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_declaration(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        year: int,
        quarter: int,
        notes: str | None = None,
    ) -> CbamDeclaration:
        today = self.now().date()
        deadlines.validate_period(
            year,
            quarter,
            min_year=self._settings.min_year,
            max_year=self._settings.max_year(today),
        )
        cleaned_notes = workflow.validate_notes(notes)

        with ledger_transaction(db):
            AccountRepository(db).ensure_account_exists(account_id)
            repository = DeclarationRepository(db)
            if repository.find_by_period(account_id, year, quarter) is not None:
                raise DuplicatePeriodError(
                    f"A declaration already exists for {deadlines.period_label(year, quarter)}."
                )

            declaration = CbamDeclaration(
                account_id=account_id,
                reporting_year=year,
                reporting_quarter=quarter,
                status=DeclarationStatus.DRAFT,
                deadline_date=deadlines.deadline_for(year, quarter),
                notes=cleaned_notes or None,
            )
            apply_summary(declaration, EMPTY_SUMMARY)
            repository.add(declaration)

        logger.info(
            "Declaration created id=%s account_id=%s period=%s deadline=%s",
            declaration.id,
            account_id,
            declaration.period_label,
            declaration.deadline_date,
        )
        return declaration

    def update_declaration(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        notes: str | None = None,
        status: str | None = None,
        expected_version: int | None = None,
    ) -> CbamDeclaration:
        """
        Update notes and/or request a status change.

        A requested status equal to the current one leaves the status
        untouched; ``submitted`` submits and ``draft`` reopens a rejected
        declaration.
        """

        with ledger_transaction(db):
            declaration = self.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.ensure_editable(declaration)

            if notes is not None:
                declaration.notes = workflow.validate_notes(notes) or None

            previous_status = declaration.status
            if status is not None:
                workflow.request_status(declaration, status, now=self.now())

            declaration.updated_at = self.now()
            db.flush()

        if declaration.status != previous_status:
            logger.info(
                "Declaration status changed id=%s %s -> %s",
                declaration.id,
                previous_status,
                declaration.status,
            )
        return declaration

    def submit(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> CbamDeclaration:
        with ledger_transaction(db):
            declaration = self.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.submit(declaration, now=self.now())
            db.flush()

        logger.info(
            "Declaration submitted id=%s period=%s total_imports=%d",
            declaration.id,
            declaration.period_label,
            declaration.total_imports,
        )
        return declaration

    def validate(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> CbamDeclaration:
        with ledger_transaction(db):
            declaration = self.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.validate(declaration, now=self.now())
            db.flush()

        logger.info("Declaration validated id=%s period=%s", declaration.id, declaration.period_label)
        return declaration

    def reject(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        reason: str,
        expected_version: int | None = None,
    ) -> CbamDeclaration:
        with ledger_transaction(db):
            declaration = self.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.reject(declaration, reason, now=self.now())
            db.flush()

        logger.info("Declaration rejected id=%s period=%s", declaration.id, declaration.period_label)
        return declaration

    def delete_declaration(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> None:
        with ledger_transaction(db):
            declaration = self.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.ensure_editable(declaration)
            removed_lines = declaration.total_imports
            DeclarationRepository(db).delete(declaration)

        logger.info(
            "Declaration deleted id=%s account_id=%s import_lines=%d",
            declaration_id,
            account_id,
            removed_lines,
        )

    # ------------------------------------------------------------------
    # Shared by the import line commands
    # ------------------------------------------------------------------

    def lock_declaration(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> CbamDeclaration:
        declaration = DeclarationRepository(db).get_for_account(account_id, declaration_id, lock=True)
        if expected_version is not None and declaration.version != expected_version:
            raise ConcurrencyConflictError(
                f"Declaration {declaration_id} is at version {declaration.version}, "
                f"not {expected_version}. Reload it and retry."
            )
        return declaration

    def update_summary(self, *, db: Session, declaration: CbamDeclaration) -> DeclarationSummary:
        """
        Rebuild the summary from the stored import lines of the declaration.

        Pending line changes are flushed first. Touching ``updated_at``
        guarantees an UPDATE, so the version advances even when the figures
        come out unchanged.
        """

        db.flush()
        lines = ImportLineRepository(db).list_for_declaration(declaration.id)
        summary = summarize(lines)
        apply_summary(declaration, summary)
        declaration.updated_at = self.now()
        db.flush()
        return summary


def get_declaration_service() -> DeclarationService:
    """
    Build the declaration service with env-driven settings.
    """
    return DeclarationService(settings=get_ledger_settings())
