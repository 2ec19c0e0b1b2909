"""
db/models/account.py

Account model: root entity for one business using the ledger.
All declarations and suppliers are scoped to an account.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.declaration import CbamDeclaration
    from db.models.supplier import Supplier


class Account(Base, TimestampMixin):
    """
    Represents one importing business.

    Authentication lives outside the ledger; the boundary layer only
    hands over the account id of the caller.
    """

    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    company: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Soft-disable an account without deletion",
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    declarations: Mapped[list["CbamDeclaration"]] = relationship(
        "CbamDeclaration",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    suppliers: Mapped[list["Supplier"]] = relationship(
        "Supplier",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_accounts_is_active", "is_active"),)

    def __repr__(self) -> str:
        return f"<Account id={self.id} name={self.name!r} email={self.email!r}>"
