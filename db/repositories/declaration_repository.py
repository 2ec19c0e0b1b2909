"""
Declaration repository responsible for scoped lookups, listings and deletes.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from db.models.declaration import CbamDeclaration
from db.repositories.types import DeclarationFilters, Page, PageRequest
from ledger.errors import NotFoundError
from ledger.vocabulary import DeclarationStatus

_SORTABLE_COLUMNS = {
    "created_at": CbamDeclaration.created_at,
    "deadline_date": CbamDeclaration.deadline_date,
    "submitted_at": CbamDeclaration.submitted_at,
}


class DeclarationRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_for_account(
        self,
        account_id: uuid.UUID,
        declaration_id: uuid.UUID,
        *,
        lock: bool = False,
    ) -> CbamDeclaration:
        """
        Load one declaration owned by the account.

        ``lock`` takes a row lock (SELECT ... FOR UPDATE) for the rest of
        the transaction on backends that support it.
        """

        stmt = select(CbamDeclaration).where(
            CbamDeclaration.id == declaration_id,
            CbamDeclaration.account_id == account_id,
        )
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        declaration = self._session.scalars(stmt).first()
        if declaration is None:
            raise NotFoundError("declaration", declaration_id)
        return declaration

    def find_by_period(self, account_id: uuid.UUID, year: int, quarter: int) -> CbamDeclaration | None:
        stmt = select(CbamDeclaration).where(
            CbamDeclaration.account_id == account_id,
            CbamDeclaration.reporting_year == year,
            CbamDeclaration.reporting_quarter == quarter,
        )
        return self._session.scalars(stmt).first()

    def add(self, declaration: CbamDeclaration) -> CbamDeclaration:
        self._session.add(declaration)
        self._session.flush()
        return declaration

    def delete(self, declaration: CbamDeclaration) -> None:
        # ORM cascade removes import lines and their documents.
        self._session.delete(declaration)
        self._session.flush()

    def list_for_account(
        self,
        account_id: uuid.UUID,
        *,
        filters: DeclarationFilters,
        page: PageRequest,
    ) -> Page[CbamDeclaration]:
        stmt: Select[tuple[CbamDeclaration]] = select(CbamDeclaration).where(
            CbamDeclaration.account_id == account_id
        )

        if filters.status:
            stmt = stmt.where(CbamDeclaration.status == filters.status)
        if filters.year is not None:
            stmt = stmt.where(CbamDeclaration.reporting_year == filters.year)
        if filters.quarter is not None:
            stmt = stmt.where(CbamDeclaration.reporting_quarter == filters.quarter)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            stmt = stmt.where(
                or_(
                    CbamDeclaration.notes.ilike(pattern),
                    CbamDeclaration.rejection_reason.ilike(pattern),
                )
            )

        total = self._session.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        column = _SORTABLE_COLUMNS.get(page.sort_by, CbamDeclaration.created_at)
        stmt = stmt.order_by(column.desc() if page.descending else column.asc())
        stmt = stmt.offset(page.offset).limit(page.limit)

        return Page(
            items=list(self._session.scalars(stmt).all()),
            page=page.page,
            limit=page.limit,
            total=total,
        )

    def recent_for_account(self, account_id: uuid.UUID, *, limit: int = 5) -> list[CbamDeclaration]:
        stmt = (
            select(CbamDeclaration)
            .where(CbamDeclaration.account_id == account_id)
            .order_by(CbamDeclaration.created_at.desc())
            .limit(limit)
        )
        return list(self._session.scalars(stmt).all())

    def count_by_status(self, account_id: uuid.UUID) -> dict[str, int]:
        stmt = (
            select(CbamDeclaration.status, func.count())
            .where(CbamDeclaration.account_id == account_id)
            .group_by(CbamDeclaration.status)
        )
        return {status: count for status, count in self._session.execute(stmt).all()}

    def find_pending_deadlines(
        self,
        *,
        until: date,
        account_id: uuid.UUID | None = None,
    ) -> list[CbamDeclaration]:
        """
        Draft or pending declarations whose deadline falls on or before ``until``,
        soonest first.
        """

        stmt = select(CbamDeclaration).where(
            CbamDeclaration.status.in_((DeclarationStatus.DRAFT, DeclarationStatus.PENDING)),
            CbamDeclaration.deadline_date <= until,
        )
        if account_id is not None:
            stmt = stmt.where(CbamDeclaration.account_id == account_id)
        stmt = stmt.order_by(CbamDeclaration.deadline_date.asc())
        return list(self._session.scalars(stmt).all())
