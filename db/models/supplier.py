"""
db/models/supplier.py

Supplier directory entry owned by one account.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, JSONDocument, TimestampMixin
from ledger.suppliers import latest_verification

if TYPE_CHECKING:
    from db.models.account import Account


class Supplier(Base, TimestampMixin):
    """
    A non-EU producer the account buys CBAM goods from.

    Import lines reference suppliers by name and country text, not by
    foreign key. carbon_intensity_data holds at most one verified
    intensity entry per sector.
    """

    __tablename__ = "suppliers"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    registration_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    carbon_intensity_data: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONDocument,
        nullable=False,
        default=list,
        comment="Per-sector verified intensity: sector, value, verified_at, certificate",
    )

    account: Mapped["Account"] = relationship("Account", back_populates="suppliers")

    __table_args__ = (
        UniqueConstraint("account_id", "name", "country", name="uq_suppliers_account_name_country"),
        Index("ix_suppliers_account_verified", "account_id", "is_verified"),
        Index("ix_suppliers_country", "country"),
    )

    @property
    def full_address(self) -> str:
        return ", ".join(part for part in (self.address, self.country) if part)

    @property
    def contact_info(self) -> str:
        return " | ".join(part for part in (self.contact_email, self.contact_phone) if part)

    @property
    def sectors(self) -> list[str]:
        return [entry["sector"] for entry in self.carbon_intensity_data or []]

    @property
    def last_verified_at(self) -> datetime | None:
        return latest_verification(self.carbon_intensity_data or [])

    def __repr__(self) -> str:
        return f"<Supplier id={self.id} name={self.name!r} country={self.country!r}>"
