"""
app/services/import_line_service.py

Import line commands. Each one is "mutate line(s), then recompute the
declaration summary" inside a single transaction on the locked declaration.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from app.services.declaration_service import DeclarationService, get_declaration_service
from app.services.transactions import ledger_transaction
from db.models.import_line import CbamImport, ImportDocument
from db.repositories.declaration_repository import DeclarationRepository
from db.repositories.import_line_repository import ImportLineRepository
from db.repositories.product_repository import ProductRepository
from ledger import imports as import_rules
from ledger import workflow
from ledger.errors import FieldValidationError
from ledger.imports import DocumentCandidate, ImportLineCandidate
from ledger.vocabulary import DocumentType, ImportStatus

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("supplier_name", "supplier_country", "notes")


class ImportLineService:
    """
    Create, update and delete import lines and their document metadata.
    """

    def __init__(self, *, declarations: DeclarationService) -> None:
        self._declarations = declarations

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_import_line(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        import_id: uuid.UUID,
    ) -> CbamImport:
        DeclarationRepository(db).get_for_account(account_id, declaration_id)
        return ImportLineRepository(db).get_for_declaration(declaration_id, import_id)

    def list_import_lines(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
    ) -> list[CbamImport]:
        DeclarationRepository(db).get_for_account(account_id, declaration_id)
        return ImportLineRepository(db).list_for_declaration(declaration_id)

    def documents_by_type(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        import_id: uuid.UUID,
        document_type: str,
    ) -> list[ImportDocument]:
        if document_type not in DocumentType.ALL:
            raise FieldValidationError(
                "document_type",
                f"document_type must be one of {list(DocumentType.ALL)}.",
            )
        line = self.get_import_line(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            import_id=import_id,
        )
        return line.documents_by_type(document_type)

    def validate_data(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        import_id: uuid.UUID,
    ) -> list[str]:
        """Business-rule problems of a stored line; empty when the line is complete."""

        line = self.get_import_line(
            db=db,
            account_id=account_id,
            declaration_id=declaration_id,
            import_id=import_id,
        )
        return import_rules.line_problems(line)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_import_line(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        candidate: ImportLineCandidate,
        expected_version: int | None = None,
    ) -> CbamImport:
        """
        Add a line to an editable declaration.

        Guards run in order: editability, field ranges, product existence.
        Any client-supplied total value is replaced by quantity * unit value.
        """

        with ledger_transaction(db):
            declaration = self._declarations.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.ensure_editable(declaration)
            import_rules.validate_candidate(candidate)
            product = ProductRepository(db).get_active(candidate.product_id)

            line = CbamImport(
                product_id=product.id,
                supplier_name=candidate.supplier_name.strip(),
                supplier_country=candidate.supplier_country.strip(),
                quantity=candidate.quantity,
                unit_value=candidate.unit_value,
                total_value=import_rules.compute_total_value(candidate.quantity, candidate.unit_value),
                carbon_emissions=candidate.carbon_emissions,
                carbon_certificates=candidate.carbon_certificates,
                status=ImportStatus.PENDING,
                notes=candidate.notes.strip() if candidate.notes and candidate.notes.strip() else None,
            )
            line.product = product
            declaration.imports.append(line)
            summary = self._declarations.update_summary(db=db, declaration=declaration)

        logger.info(
            "Import line created id=%s declaration_id=%s cn_code=%s emissions=%s total_imports=%d",
            line.id,
            declaration_id,
            product.cn_code,
            line.carbon_emissions,
            summary.total_imports,
        )
        return line

    def update_import_line(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        import_id: uuid.UUID,
        changes: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> CbamImport:
        """
        Apply a partial update. Fields mapped to ``None`` are left unchanged.
        """

        with ledger_transaction(db):
            declaration = self._declarations.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.ensure_editable(declaration)
            line = ImportLineRepository(db).get_for_declaration(declaration_id, import_id)
            cleaned = import_rules.validate_changes(changes)

            for field, value in cleaned.items():
                if field in _TEXT_FIELDS:
                    value = value.strip() or None
                setattr(line, field, value)
            if "quantity" in cleaned or "unit_value" in cleaned:
                line.total_value = import_rules.compute_total_value(line.quantity, line.unit_value)
            else:
                line.reconcile_total_value()

            self._declarations.update_summary(db=db, declaration=declaration)

        logger.info(
            "Import line updated id=%s declaration_id=%s fields=%s",
            import_id,
            declaration_id,
            sorted(cleaned),
        )
        return line

    def delete_import_line(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        import_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> None:
        with ledger_transaction(db):
            declaration = self._declarations.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.ensure_editable(declaration)
            line = ImportLineRepository(db).get_for_declaration(declaration_id, import_id)
            declaration.imports.remove(line)
            summary = self._declarations.update_summary(db=db, declaration=declaration)

        logger.info(
            "Import line deleted id=%s declaration_id=%s total_imports=%d",
            import_id,
            declaration_id,
            summary.total_imports,
        )

    def add_document(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        import_id: uuid.UUID,
        candidate: DocumentCandidate,
        expected_version: int | None = None,
    ) -> ImportDocument:
        with ledger_transaction(db):
            declaration = self._declarations.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.ensure_editable(declaration)
            line = ImportLineRepository(db).get_for_declaration(declaration_id, import_id)
            import_rules.validate_document(candidate)

            document = ImportDocument(
                name=candidate.name.strip(),
                document_type=candidate.document_type,
                url=candidate.url.strip(),
                size_bytes=candidate.size_bytes,
                uploaded_at=self._declarations.now(),
            )
            line.documents.append(document)
            self._declarations.update_summary(db=db, declaration=declaration)

        logger.info(
            "Document attached id=%s import_id=%s type=%s",
            document.id,
            import_id,
            document.document_type,
        )
        return document

    def remove_document(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        import_id: uuid.UUID,
        document_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> None:
        with ledger_transaction(db):
            declaration = self._declarations.lock_declaration(
                db=db,
                account_id=account_id,
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
            workflow.ensure_editable(declaration)
            repository = ImportLineRepository(db)
            line = repository.get_for_declaration(declaration_id, import_id)
            document = repository.get_document(import_id, document_id)
            line.documents.remove(document)
            self._declarations.update_summary(db=db, declaration=declaration)

        logger.info("Document removed id=%s import_id=%s", document_id, import_id)


def get_import_line_service() -> ImportLineService:
    """
    Build the import line service on top of the declaration service.
    """
    return ImportLineService(declarations=get_declaration_service())
