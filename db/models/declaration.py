"""
db/models/declaration.py

Quarterly CBAM declaration, one per account and reporting period.
Owns its import lines; the summary columns always mirror their sum.
"""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin
from ledger import deadlines, workflow
from ledger.summary import DeclarationSummary, read_summary
from ledger.vocabulary import DECLARATION_STATUS_LABELS, DeclarationStatus

if TYPE_CHECKING:
    from db.models.account import Account
    from db.models.import_line import CbamImport


class CbamDeclaration(Base, TimestampMixin):
    """
    A quarterly declaration of embedded emissions in imported goods.

    deadline_date is derived from the reporting period once, at creation,
    and never recomputed. ``version`` is SQLAlchemy's optimistic
    concurrency counter: every flushed UPDATE increments it and a stale
    writer fails with StaleDataError.
    """

    __tablename__ = "cbam_declarations"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    reporting_year: Mapped[int] = mapped_column(Integer, nullable=False)
    reporting_quarter: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DeclarationStatus.DRAFT,
        comment="draft → submitted → validated | rejected → draft",
    )

    # ── Summary (sum over current import lines) ────────────────────────────────

    total_imports: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_emissions: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_certificates_required: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_certificates_held: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # ── Lifecycle ──────────────────────────────────────────────────────────────

    deadline_date: Mapped[date] = mapped_column(Date, nullable=False)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    validated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # ── Relationships ──────────────────────────────────────────────────────────

    account: Mapped["Account"] = relationship("Account", back_populates="declarations")

    imports: Mapped[list["CbamImport"]] = relationship(
        "CbamImport",
        back_populates="declaration",
        cascade="all, delete-orphan",
        order_by="CbamImport.created_at.desc()",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint(
            "account_id",
            "reporting_year",
            "reporting_quarter",
            name="uq_cbam_declarations_account_period",
        ),
        CheckConstraint(
            "reporting_quarter BETWEEN 1 AND 4",
            name="ck_cbam_declarations_quarter",
        ),
        Index("ix_cbam_declarations_account_status_deadline", "account_id", "status", "deadline_date"),
        Index("ix_cbam_declarations_deadline_status", "deadline_date", "status"),
        Index("ix_cbam_declarations_created_at", "created_at"),
    )

    # ── Derived read fields ────────────────────────────────────────────────────

    @property
    def summary(self) -> DeclarationSummary:
        return read_summary(self)

    @property
    def period_label(self) -> str:
        return deadlines.period_label(self.reporting_year, self.reporting_quarter)

    @property
    def status_label(self) -> str:
        return DECLARATION_STATUS_LABELS[self.status]

    @property
    def can_edit(self) -> bool:
        return workflow.can_edit(self.status)

    @property
    def can_submit(self) -> bool:
        return workflow.can_submit(self.status, self.total_imports)

    def is_overdue(self, today: date) -> bool:
        return deadlines.is_overdue(self.deadline_date, self.status, today)

    def days_until_deadline(self, today: date) -> int:
        return deadlines.days_until_deadline(self.deadline_date, today)

    def __repr__(self) -> str:
        return (
            f"<CbamDeclaration id={self.id} period={self.period_label!r} "
            f"status={self.status!r} version={self.version}>"
        )
