"""
Supplier repository: account-scoped directory lookups.
"""

from __future__ import annotations

import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from db.models.supplier import Supplier
from db.repositories.types import Page, PageRequest, SupplierFilters
from ledger.errors import NotFoundError

_SORTABLE_COLUMNS = {
    "name": Supplier.name,
    "country": Supplier.country,
    "created_at": Supplier.created_at,
    "is_verified": Supplier.is_verified,
}


class SupplierRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_for_account(self, account_id: uuid.UUID, supplier_id: uuid.UUID) -> Supplier:
        stmt = select(Supplier).where(
            Supplier.id == supplier_id,
            Supplier.account_id == account_id,
        )
        supplier = self._session.scalars(stmt).first()
        if supplier is None:
            raise NotFoundError("supplier", supplier_id)
        return supplier

    def find_by_name_country(self, account_id: uuid.UUID, name: str, country: str) -> Supplier | None:
        stmt = select(Supplier).where(
            Supplier.account_id == account_id,
            Supplier.name == name,
            Supplier.country == country,
        )
        return self._session.scalars(stmt).first()

    def add(self, supplier: Supplier) -> Supplier:
        self._session.add(supplier)
        self._session.flush()
        return supplier

    def delete(self, supplier: Supplier) -> None:
        self._session.delete(supplier)
        self._session.flush()

    def list_for_account(
        self,
        account_id: uuid.UUID,
        *,
        filters: SupplierFilters,
        page: PageRequest,
    ) -> Page[Supplier]:
        stmt = select(Supplier).where(Supplier.account_id == account_id)

        if filters.country:
            stmt = stmt.where(Supplier.country == filters.country)
        if filters.is_verified is not None:
            stmt = stmt.where(Supplier.is_verified.is_(filters.is_verified))
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            stmt = stmt.where(
                or_(
                    Supplier.name.ilike(pattern),
                    Supplier.country.ilike(pattern),
                    Supplier.address.ilike(pattern),
                    Supplier.contact_email.ilike(pattern),
                )
            )

        total = self._session.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        column = _SORTABLE_COLUMNS.get(page.sort_by, Supplier.name)
        stmt = stmt.order_by(column.desc() if page.descending else column.asc())
        stmt = stmt.offset(page.offset).limit(page.limit)

        return Page(
            items=list(self._session.scalars(stmt).all()),
            page=page.page,
            limit=page.limit,
            total=total,
        )
