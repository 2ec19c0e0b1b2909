"""
db/models/import_line.py

Import line: one consignment of a CBAM product inside a declaration,
and the metadata of documents attached to it.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin, utcnow
from ledger import imports as import_rules
from ledger.vocabulary import IMPORT_STATUS_LABELS, ImportStatus

if TYPE_CHECKING:
    from db.models.declaration import CbamDeclaration
    from db.models.product import CbamProduct


class CbamImport(Base, TimestampMixin):
    """
    One imported consignment.

    total_value is always quantity * unit_value. Certificates required are
    not stored; they are derived on read as ceil(carbon_emissions).
    """

    __tablename__ = "cbam_imports"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    declaration_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cbam_declarations.id", ondelete="CASCADE"),
        nullable=False,
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cbam_products.id", ondelete="RESTRICT"),
        nullable=False,
    )

    supplier_name: Mapped[str] = mapped_column(String(200), nullable=False)
    supplier_country: Mapped[str] = mapped_column(String(100), nullable=False)

    quantity: Mapped[float] = mapped_column(Float, nullable=False, comment="tonnes")
    unit_value: Mapped[float] = mapped_column(Float, nullable=False, comment="currency per tonne")
    total_value: Mapped[float] = mapped_column(Float, nullable=False)
    carbon_emissions: Mapped[float] = mapped_column(Float, nullable=False, comment="tCO2e")
    carbon_certificates: Mapped[float | None] = mapped_column(Float, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ImportStatus.PENDING,
    )

    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # ── Relationships ──────────────────────────────────────────────────────────

    declaration: Mapped["CbamDeclaration"] = relationship(
        "CbamDeclaration",
        back_populates="imports",
    )

    product: Mapped["CbamProduct"] = relationship("CbamProduct", lazy="joined", innerjoin=True)

    documents: Mapped[list["ImportDocument"]] = relationship(
        "ImportDocument",
        back_populates="import_line",
        cascade="all, delete-orphan",
        order_by="ImportDocument.uploaded_at",
    )

    __table_args__ = (
        Index("ix_cbam_imports_declaration_status", "declaration_id", "status"),
        Index("ix_cbam_imports_declaration_created", "declaration_id", "created_at"),
        Index("ix_cbam_imports_product_country", "product_id", "supplier_country"),
        Index("ix_cbam_imports_supplier", "supplier_name", "supplier_country"),
    )

    @property
    def certificates_required(self) -> int:
        return import_rules.certificates_required(self.carbon_emissions)

    @property
    def certificate_deficit(self) -> float:
        return import_rules.certificate_deficit(self.carbon_emissions, self.carbon_certificates)

    @property
    def is_compliant(self) -> bool:
        return import_rules.is_compliant(self.carbon_emissions, self.carbon_certificates)

    @property
    def status_label(self) -> str:
        return IMPORT_STATUS_LABELS[self.status]

    @property
    def has_required_documents(self) -> bool:
        return import_rules.has_required_documents(doc.document_type for doc in self.documents)

    def documents_by_type(self, document_type: str) -> list["ImportDocument"]:
        return [doc for doc in self.documents if doc.document_type == document_type]

    def reconcile_total_value(self) -> None:
        self.total_value = import_rules.reconcile_total_value(
            self.total_value, self.quantity, self.unit_value
        )

    def __repr__(self) -> str:
        return (
            f"<CbamImport id={self.id} declaration_id={self.declaration_id} "
            f"quantity={self.quantity} emissions={self.carbon_emissions}>"
        )


class ImportDocument(Base):
    """Metadata of a supporting document; the file itself is stored elsewhere."""

    __tablename__ = "import_documents"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    import_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cbam_imports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    document_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="invoice, certificate, customs, other",
    )

    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    import_line: Mapped["CbamImport"] = relationship("CbamImport", back_populates="documents")
