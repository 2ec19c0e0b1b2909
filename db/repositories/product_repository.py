"""
Product repository for CBAM reference data.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from db.models.product import CbamProduct
from db.repositories.types import Page, PageRequest, ProductFilters
from ledger.errors import ProductNotFoundError

_SORTABLE_COLUMNS = {
    "name": CbamProduct.name,
    "cn_code": CbamProduct.cn_code,
    "carbon_intensity": CbamProduct.carbon_intensity,
    "created_at": CbamProduct.created_at,
}


class ProductRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_active(self, product_id: uuid.UUID) -> CbamProduct:
        product = self._session.get(CbamProduct, product_id)
        if product is None or not product.is_active:
            raise ProductNotFoundError(f"Product not found or inactive: {product_id}")
        return product

    def get_by_cn_code(self, cn_code: str) -> CbamProduct | None:
        stmt = select(CbamProduct).where(CbamProduct.cn_code == cn_code)
        return self._session.scalars(stmt).first()

    def list_products(self, *, filters: ProductFilters, page: PageRequest) -> Page[CbamProduct]:
        stmt = select(CbamProduct)
        if filters.active_only:
            stmt = stmt.where(CbamProduct.is_active.is_(True))
        if filters.sector:
            stmt = stmt.where(CbamProduct.sector == filters.sector)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            stmt = stmt.where(
                or_(
                    CbamProduct.name.ilike(pattern),
                    CbamProduct.description.ilike(pattern),
                    CbamProduct.cn_code.ilike(pattern),
                )
            )

        total = self._session.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        column = _SORTABLE_COLUMNS.get(page.sort_by, CbamProduct.name)
        stmt = stmt.order_by(column.desc() if page.descending else column.asc())
        stmt = stmt.offset(page.offset).limit(page.limit)

        return Page(
            items=list(self._session.scalars(stmt).all()),
            page=page.page,
            limit=page.limit,
            total=total,
        )

    def active_sectors(self) -> list[str]:
        stmt = (
            select(CbamProduct.sector)
            .where(CbamProduct.is_active.is_(True))
            .distinct()
            .order_by(CbamProduct.sector)
        )
        return list(self._session.scalars(stmt).all())

    def upsert(self, values: Mapping[str, Any]) -> tuple[CbamProduct, bool]:
        """
        Insert or update a product keyed by CN code.

        Returns the product and whether it was newly created.
        """

        product = self.get_by_cn_code(values["cn_code"])
        created = product is None
        if product is None:
            product = CbamProduct(cn_code=values["cn_code"])
            self._session.add(product)
        for field in ("name", "sector", "carbon_intensity", "description", "is_active"):
            if field in values:
                setattr(product, field, values[field])
        self._session.flush()
        return product, created
