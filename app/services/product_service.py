"""
app/services/product_service.py

Read access to CBAM product reference data plus the seeding command used
by scripts/seed_products.py.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from app.config import LedgerSettings, get_ledger_settings
from app.services.transactions import ledger_transaction
from db.models.product import CbamProduct
from db.repositories.product_repository import ProductRepository
from db.repositories.types import Page, PageRequest, ProductFilters
from ledger.errors import FieldValidationError, ProductNotFoundError
from ledger.vocabulary import Sector, sector_label

logger = logging.getLogger(__name__)

_CN_CODE_PATTERN = re.compile(r"^\d{8}$")

MAX_PRODUCT_NAME_LENGTH = 200
MAX_PRODUCT_DESCRIPTION_LENGTH = 1000
MAX_CARBON_INTENSITY = 1000.0


@dataclass(frozen=True)
class SectorInfo:
    value: str
    label: str


@dataclass(frozen=True)
class SeedResult:
    created: int
    updated: int


def validate_cn_code(cn_code: str) -> str:
    cleaned = (cn_code or "").strip()
    if not _CN_CODE_PATTERN.match(cleaned):
        raise FieldValidationError("cn_code", "cn_code must be exactly 8 digits.")
    return cleaned


def clean_product_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate one product reference record and return the column values.
    """

    name = str(record.get("name") or "").strip()
    if not name:
        raise FieldValidationError("name", "name is required.")
    if len(name) > MAX_PRODUCT_NAME_LENGTH:
        raise FieldValidationError("name", f"name must be at most {MAX_PRODUCT_NAME_LENGTH} characters.")

    sector = record.get("sector")
    if sector not in Sector.ALL:
        raise FieldValidationError("sector", f"sector must be one of {list(Sector.ALL)}.")

    try:
        intensity = float(record.get("carbon_intensity"))  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise FieldValidationError("carbon_intensity", "carbon_intensity must be a number.") from exc
    if not 0 <= intensity <= MAX_CARBON_INTENSITY:
        raise FieldValidationError(
            "carbon_intensity",
            f"carbon_intensity must be between 0 and {MAX_CARBON_INTENSITY:g}.",
        )

    description = record.get("description")
    if description is not None:
        description = str(description).strip() or None
    if description and len(description) > MAX_PRODUCT_DESCRIPTION_LENGTH:
        raise FieldValidationError(
            "description",
            f"description must be at most {MAX_PRODUCT_DESCRIPTION_LENGTH} characters.",
        )

    return {
        "cn_code": validate_cn_code(str(record.get("cn_code") or "")),
        "name": name,
        "sector": sector,
        "carbon_intensity": intensity,
        "description": description,
        "is_active": bool(record.get("is_active", True)),
    }


class ProductService:
    def __init__(self, *, settings: LedgerSettings) -> None:
        self._settings = settings

    def list_products(
        self,
        *,
        db: Session,
        filters: ProductFilters,
        page: int = 1,
        limit: int | None = None,
        sort_by: str = "name",
        descending: bool = False,
    ) -> Page[CbamProduct]:
        if filters.sector is not None and filters.sector not in Sector.ALL:
            raise FieldValidationError("sector", f"sector must be one of {list(Sector.ALL)}.")
        if limit is None:
            limit = self._settings.default_page_size
        request = PageRequest(
            page=max(1, page),
            limit=max(1, min(limit, self._settings.max_page_size)),
            sort_by=sort_by,
            descending=descending,
        )
        return ProductRepository(db).list_products(filters=filters, page=request)

    def get_by_cn_code(self, *, db: Session, cn_code: str) -> CbamProduct:
        product = ProductRepository(db).get_by_cn_code(validate_cn_code(cn_code))
        if product is None:
            raise ProductNotFoundError(f"No product with CN code {cn_code}.")
        return product

    def list_sectors(self, *, db: Session) -> list[SectorInfo]:
        """Sectors that have at least one active product, with display labels."""

        return [
            SectorInfo(value=sector, label=sector_label(sector))
            for sector in ProductRepository(db).active_sectors()
        ]

    def seed_products(self, *, db: Session, records: Iterable[Mapping[str, Any]]) -> SeedResult:
        """
        Insert or update products keyed by CN code in one transaction.
        """

        created = updated = 0
        with ledger_transaction(db):
            repository = ProductRepository(db)
            for record in records:
                _, was_created = repository.upsert(clean_product_record(record))
                if was_created:
                    created += 1
                else:
                    updated += 1

        logger.info("Products seeded created=%d updated=%d", created, updated)
        return SeedResult(created=created, updated=updated)


def get_product_service() -> ProductService:
    return ProductService(settings=get_ledger_settings())
