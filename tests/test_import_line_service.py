"""
tests/test_import_line_service.py

Integration tests for ImportLineService: every line or document mutation
must leave the declaration summary equal to a fresh aggregate of its lines.

Coverage
--------
- Q2 2024 walkthrough: create, add line, submit, reject, add again
- Guard order: editability before field ranges before product lookup
- Client-supplied total value is replaced
- Partial update recomputes total value and summary
- Delete recomputes summary
- Documents: attach, filter by type, remove, validation report
- Submitted and validated declarations refuse line and document changes
- Lines of another account are not reachable
"""

from __future__ import annotations

import uuid
from datetime import date

import pytest
from sqlalchemy.orm import Session

from app.services.declaration_service import DeclarationService
from app.services.import_line_service import ImportLineService
from db.models.account import Account
from db.models.declaration import CbamDeclaration
from db.models.product import CbamProduct
from db.repositories.import_line_repository import ImportLineRepository
from ledger.errors import (
    DeclarationNotEditableError,
    FieldValidationError,
    NotFoundError,
    ProductNotFoundError,
)
from ledger.imports import DocumentCandidate
from ledger.summary import summarize
from ledger.vocabulary import DeclarationStatus, DocumentType, ImportStatus


@pytest.fixture()
def declaration(db: Session, account: Account, declarations: DeclarationService) -> CbamDeclaration:
    return declarations.create_declaration(db=db, account_id=account.id, year=2024, quarter=2)


def _document(document_type: str, name: str = "scan.pdf") -> DocumentCandidate:
    return DocumentCandidate(name=name, document_type=document_type, url=f"s3://docs/{name}", size_bytes=1024)


def _assert_summary_matches_lines(db: Session, declaration: CbamDeclaration) -> None:
    expected = summarize(ImportLineRepository(db).list_for_declaration(declaration.id))
    assert declaration.summary == expected


# ---------------------------------------------------------------------------
# Walkthrough
# ---------------------------------------------------------------------------


class TestQuarterWalkthrough:
    def test_q2_2024(
        self,
        db: Session,
        account: Account,
        declarations: DeclarationService,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        declaration = declarations.create_declaration(db=db, account_id=account.id, year=2024, quarter=2)
        assert declaration.deadline_date == date(2024, 8, 31)
        assert declaration.status == DeclarationStatus.DRAFT
        assert declaration.total_imports == 0

        line = import_lines.create_import_line(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            candidate=make_candidate(quantity=10.0, unit_value=100.0, carbon_emissions=5.0),
        )
        assert line.total_value == pytest.approx(1000.0)
        assert line.status == ImportStatus.PENDING
        assert declaration.total_imports == 1
        assert declaration.total_emissions == pytest.approx(5.0)
        assert declaration.total_certificates_required == pytest.approx(5.0)

        declarations.submit(db=db, account_id=account.id, declaration_id=declaration.id)
        declarations.reject(
            db=db, account_id=account.id, declaration_id=declaration.id, reason="missing invoice"
        )

        # Rejected declarations are editable again.
        import_lines.create_import_line(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            candidate=make_candidate(supplier_name="Baotou Steel", quantity=2.0, carbon_emissions=1.5),
        )
        reloaded = declarations.get_declaration(db=db, account_id=account.id, declaration_id=declaration.id)
        assert reloaded.status == DeclarationStatus.REJECTED
        assert reloaded.total_imports == 2
        assert reloaded.total_emissions == pytest.approx(6.5)
        assert reloaded.total_value == pytest.approx(1200.0)
        _assert_summary_matches_lines(db, reloaded)


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreate:
    def test_client_total_value_is_replaced(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            candidate=make_candidate(quantity=3.0, unit_value=250.0, total_value=1.0),
        )
        assert line.total_value == pytest.approx(750.0)

    def test_text_fields_trimmed(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            candidate=make_candidate(supplier_name="  Anhui Steel  ", notes="   "),
        )
        assert line.supplier_name == "Anhui Steel"
        assert line.notes is None

    def test_invalid_field(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        with pytest.raises(FieldValidationError) as excinfo:
            import_lines.create_import_line(
                db=db,
                account_id=account.id,
                declaration_id=declaration.id,
                candidate=make_candidate(quantity=0.0),
            )
        assert excinfo.value.field == "quantity"

    def test_inactive_product(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        inactive_product: CbamProduct,
        make_candidate,
    ) -> None:
        with pytest.raises(ProductNotFoundError):
            import_lines.create_import_line(
                db=db,
                account_id=account.id,
                declaration_id=declaration.id,
                candidate=make_candidate(product_id=inactive_product.id),
            )

    def test_unknown_product(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        with pytest.raises(ProductNotFoundError):
            import_lines.create_import_line(
                db=db,
                account_id=account.id,
                declaration_id=declaration.id,
                candidate=make_candidate(product_id=uuid.uuid4()),
            )

    def test_editability_checked_first(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        declarations: DeclarationService,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        declarations.submit(db=db, account_id=account.id, declaration_id=declaration.id)

        with pytest.raises(DeclarationNotEditableError):
            import_lines.create_import_line(
                db=db,
                account_id=account.id,
                declaration_id=declaration.id,
                candidate=make_candidate(quantity=-5.0, product_id=uuid.uuid4()),
            )

    def test_other_account_cannot_add(
        self,
        db: Session,
        other_account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        with pytest.raises(NotFoundError):
            import_lines.create_import_line(
                db=db,
                account_id=other_account.id,
                declaration_id=declaration.id,
                candidate=make_candidate(),
            )


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------


class TestUpdateDelete:
    def test_update_recomputes(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        declarations: DeclarationService,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        updated = import_lines.update_import_line(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            import_id=line.id,
            changes={"quantity": 20.0, "carbon_emissions": 8.4, "carbon_certificates": 9.0, "notes": None},
        )
        assert updated.total_value == pytest.approx(2000.0)
        assert updated.is_compliant

        reloaded = declarations.get_declaration(db=db, account_id=account.id, declaration_id=declaration.id)
        assert reloaded.total_quantity == pytest.approx(20.0)
        assert reloaded.total_emissions == pytest.approx(8.4)
        assert reloaded.total_certificates_held == pytest.approx(9.0)
        _assert_summary_matches_lines(db, reloaded)

    def test_update_status(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        updated = import_lines.update_import_line(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            import_id=line.id,
            changes={"status": ImportStatus.COMPLETED},
        )
        assert updated.status == ImportStatus.COMPLETED
        assert updated.total_value == pytest.approx(1000.0)

    def test_update_rejects_bad_value(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        with pytest.raises(FieldValidationError):
            import_lines.update_import_line(
                db=db,
                account_id=account.id,
                declaration_id=declaration.id,
                import_id=line.id,
                changes={"unit_value": -3.0},
            )
        fresh = import_lines.get_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, import_id=line.id
        )
        assert fresh.unit_value == pytest.approx(100.0)

    def test_delete_recomputes(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        declarations: DeclarationService,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        first = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        import_lines.create_import_line(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            candidate=make_candidate(supplier_name="Baotou Steel", carbon_emissions=2.5),
        )

        import_lines.delete_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, import_id=first.id
        )

        reloaded = declarations.get_declaration(db=db, account_id=account.id, declaration_id=declaration.id)
        assert reloaded.total_imports == 1
        assert reloaded.total_emissions == pytest.approx(2.5)
        _assert_summary_matches_lines(db, reloaded)

        with pytest.raises(NotFoundError):
            import_lines.get_import_line(
                db=db, account_id=account.id, declaration_id=declaration.id, import_id=first.id
            )

    def test_delete_last_line_zeroes_summary(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        declarations: DeclarationService,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        import_lines.delete_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, import_id=line.id
        )
        reloaded = declarations.get_declaration(db=db, account_id=account.id, declaration_id=declaration.id)
        assert reloaded.total_imports == 0
        assert reloaded.total_value == 0.0
        assert not reloaded.can_submit


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class TestDocuments:
    def test_attach_filter_remove(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        invoice = import_lines.add_document(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            import_id=line.id,
            candidate=_document(DocumentType.INVOICE, "invoice-17.pdf"),
        )
        import_lines.add_document(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            import_id=line.id,
            candidate=_document(DocumentType.CERTIFICATE, "emissions-17.pdf"),
        )

        invoices = import_lines.documents_by_type(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            import_id=line.id,
            document_type=DocumentType.INVOICE,
        )
        assert [doc.name for doc in invoices] == ["invoice-17.pdf"]
        assert line.has_required_documents

        import_lines.remove_document(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            import_id=line.id,
            document_id=invoice.id,
        )
        assert not line.has_required_documents

    def test_unknown_document_type_filter(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        with pytest.raises(FieldValidationError):
            import_lines.documents_by_type(
                db=db,
                account_id=account.id,
                declaration_id=declaration.id,
                import_id=line.id,
                document_type="photo",
            )

    def test_validate_data(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        import_lines: ImportLineService,
        make_candidate,
    ) -> None:
        line = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        problems = import_lines.validate_data(
            db=db, account_id=account.id, declaration_id=declaration.id, import_id=line.id
        )
        assert problems == ["An invoice and an emissions certificate are required."]

        for document_type in (DocumentType.INVOICE, DocumentType.CERTIFICATE):
            import_lines.add_document(
                db=db,
                account_id=account.id,
                declaration_id=declaration.id,
                import_id=line.id,
                candidate=_document(document_type),
            )
        assert import_lines.validate_data(
            db=db, account_id=account.id, declaration_id=declaration.id, import_id=line.id
        ) == []


# ---------------------------------------------------------------------------
# Locked declarations
# ---------------------------------------------------------------------------


def _mutate(
    operation: str,
    import_lines: ImportLineService,
    db: Session,
    account: Account,
    declaration_id: uuid.UUID,
    import_id: uuid.UUID,
    document_id: uuid.UUID,
) -> None:
    scope = {"db": db, "account_id": account.id, "declaration_id": declaration_id, "import_id": import_id}
    if operation == "update_import_line":
        import_lines.update_import_line(**scope, changes={"quantity": 3.0})
    elif operation == "delete_import_line":
        import_lines.delete_import_line(**scope)
    elif operation == "add_document":
        import_lines.add_document(**scope, candidate=_document(DocumentType.CUSTOMS, "customs-17.pdf"))
    elif operation == "remove_document":
        import_lines.remove_document(**scope, document_id=document_id)
    else:
        raise AssertionError(operation)


class TestLockedDeclaration:
    @pytest.mark.parametrize("status", [DeclarationStatus.SUBMITTED, DeclarationStatus.VALIDATED])
    @pytest.mark.parametrize(
        "operation",
        ["update_import_line", "delete_import_line", "add_document", "remove_document"],
    )
    def test_mutation_refused(
        self,
        db: Session,
        account: Account,
        declaration: CbamDeclaration,
        declarations: DeclarationService,
        import_lines: ImportLineService,
        make_candidate,
        status: str,
        operation: str,
    ) -> None:
        line = import_lines.create_import_line(
            db=db, account_id=account.id, declaration_id=declaration.id, candidate=make_candidate()
        )
        document = import_lines.add_document(
            db=db,
            account_id=account.id,
            declaration_id=declaration.id,
            import_id=line.id,
            candidate=_document(DocumentType.INVOICE, "invoice-17.pdf"),
        )
        declarations.submit(db=db, account_id=account.id, declaration_id=declaration.id)
        if status == DeclarationStatus.VALIDATED:
            declarations.validate(db=db, account_id=account.id, declaration_id=declaration.id)

        before = declarations.get_declaration(db=db, account_id=account.id, declaration_id=declaration.id)
        summary_before, version_before = before.summary, before.version
        declaration_id, import_id, document_id = declaration.id, line.id, document.id

        with pytest.raises(DeclarationNotEditableError):
            _mutate(operation, import_lines, db, account, declaration_id, import_id, document_id)

        after = declarations.get_declaration(db=db, account_id=account.id, declaration_id=declaration_id)
        assert after.status == status
        assert after.summary == summary_before
        assert after.version == version_before
        _assert_summary_matches_lines(db, after)

        fresh = import_lines.get_import_line(
            db=db, account_id=account.id, declaration_id=declaration_id, import_id=import_id
        )
        assert fresh.quantity == pytest.approx(10.0)
        assert [doc.id for doc in fresh.documents] == [document_id]
