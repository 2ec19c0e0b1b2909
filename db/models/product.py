"""
db/models/product.py

CBAM product reference data, keyed by its 8-digit CN code.
"""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin
from ledger.vocabulary import sector_label


class CbamProduct(Base, TimestampMixin):
    """
    One product covered by the carbon border adjustment regime.

    carbon_intensity is expressed in tCO2e per tonne of product.
    Products are managed outside the ledger and only deactivated, never
    deleted, once import lines reference them.
    """

    __tablename__ = "cbam_products"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    cn_code: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        unique=True,
        comment="Combined nomenclature code, exactly 8 digits",
    )

    sector: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="cement, iron_steel, aluminum, fertilizers, electricity, hydrogen",
    )

    carbon_intensity: Mapped[float] = mapped_column(Float, nullable=False)

    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "carbon_intensity >= 0 AND carbon_intensity <= 1000",
            name="ck_cbam_products_carbon_intensity",
        ),
        Index("ix_cbam_products_sector_active", "sector", "is_active"),
    )

    @property
    def sector_label(self) -> str:
        return sector_label(self.sector)

    def calculate_emissions(self, quantity: float) -> float:
        return quantity * self.carbon_intensity

    def __repr__(self) -> str:
        return f"<CbamProduct cn_code={self.cn_code!r} sector={self.sector!r}>"
