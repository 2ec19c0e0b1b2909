"""
Import line repository: scoped lookups, summary figures and dashboard aggregates.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models.declaration import CbamDeclaration
from db.models.import_line import CbamImport, ImportDocument
from db.models.product import CbamProduct
from db.repositories.types import GroupTotals, ImportTotals
from ledger.errors import NotFoundError


def _group_columns():
    return (
        func.count(CbamImport.id),
        func.coalesce(func.sum(CbamImport.quantity), 0.0),
        func.coalesce(func.sum(CbamImport.total_value), 0.0),
        func.coalesce(func.sum(CbamImport.carbon_emissions), 0.0),
    )


class ImportLineRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_for_declaration(self, declaration_id: uuid.UUID, import_id: uuid.UUID) -> CbamImport:
        stmt = select(CbamImport).where(
            CbamImport.id == import_id,
            CbamImport.declaration_id == declaration_id,
        )
        line = self._session.scalars(stmt).first()
        if line is None:
            raise NotFoundError("import_line", import_id)
        return line

    def list_for_declaration(self, declaration_id: uuid.UUID) -> list[CbamImport]:
        stmt = (
            select(CbamImport)
            .where(CbamImport.declaration_id == declaration_id)
            .order_by(CbamImport.created_at.desc())
        )
        return list(self._session.scalars(stmt).all())

    def get_document(self, import_id: uuid.UUID, document_id: uuid.UUID) -> ImportDocument:
        stmt = select(ImportDocument).where(
            ImportDocument.id == document_id,
            ImportDocument.import_id == import_id,
        )
        document = self._session.scalars(stmt).first()
        if document is None:
            raise NotFoundError("document", document_id)
        return document

    # ── Dashboard aggregates ───────────────────────────────────────────────────

    def totals_for_account(self, account_id: uuid.UUID) -> ImportTotals:
        stmt = (
            select(
                func.count(CbamImport.id),
                func.coalesce(func.sum(CbamImport.carbon_emissions), 0.0),
                func.coalesce(func.sum(CbamImport.total_value), 0.0),
            )
            .join(CbamDeclaration, CbamImport.declaration_id == CbamDeclaration.id)
            .where(CbamDeclaration.account_id == account_id)
        )
        count, emissions, value = self._session.execute(stmt).one()
        return ImportTotals(
            total_imports=int(count),
            total_emissions=float(emissions),
            total_value=float(value),
        )

    def totals_by_sector(self, account_id: uuid.UUID) -> list[GroupTotals]:
        stmt = (
            select(CbamProduct.sector, *_group_columns())
            .join(CbamDeclaration, CbamImport.declaration_id == CbamDeclaration.id)
            .join(CbamProduct, CbamImport.product_id == CbamProduct.id)
            .where(CbamDeclaration.account_id == account_id)
            .group_by(CbamProduct.sector)
            .order_by(func.sum(CbamImport.carbon_emissions).desc())
        )
        return [self._to_group(row) for row in self._session.execute(stmt).all()]

    def totals_by_country(self, account_id: uuid.UUID, *, limit: int = 10) -> list[GroupTotals]:
        stmt = (
            select(CbamImport.supplier_country, *_group_columns())
            .join(CbamDeclaration, CbamImport.declaration_id == CbamDeclaration.id)
            .where(CbamDeclaration.account_id == account_id)
            .group_by(CbamImport.supplier_country)
            .order_by(func.sum(CbamImport.total_value).desc())
            .limit(limit)
        )
        return [self._to_group(row) for row in self._session.execute(stmt).all()]

    def monthly_totals(self, account_id: uuid.UUID, *, since: datetime) -> list[GroupTotals]:
        """
        Totals per calendar month (``YYYY-MM``) of lines created since ``since``.

        Grouping happens in Python so the query stays portable across backends.
        """

        stmt = (
            select(
                CbamImport.created_at,
                CbamImport.quantity,
                CbamImport.total_value,
                CbamImport.carbon_emissions,
            )
            .join(CbamDeclaration, CbamImport.declaration_id == CbamDeclaration.id)
            .where(
                CbamDeclaration.account_id == account_id,
                CbamImport.created_at >= since,
            )
        )

        buckets: dict[str, list[float]] = defaultdict(lambda: [0, 0.0, 0.0, 0.0])
        for created_at, quantity, total_value, emissions in self._session.execute(stmt).all():
            bucket = buckets[created_at.strftime("%Y-%m")]
            bucket[0] += 1
            bucket[1] += quantity
            bucket[2] += total_value
            bucket[3] += emissions

        return [
            GroupTotals(
                key=month,
                total_imports=int(values[0]),
                total_quantity=values[1],
                total_value=values[2],
                total_emissions=values[3],
            )
            for month, values in sorted(buckets.items())
        ]

    @staticmethod
    def _to_group(row) -> GroupTotals:  # type: ignore[no-untyped-def]
        key, count, quantity, value, emissions = row
        return GroupTotals(
            key=key,
            total_imports=int(count),
            total_quantity=float(quantity),
            total_value=float(value),
            total_emissions=float(emissions),
        )
