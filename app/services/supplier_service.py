"""
app/services/supplier_service.py

Supplier directory commands scoped to one account.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from app.config import LedgerSettings, SupplierSettings, get_ledger_settings, get_supplier_settings
from app.services.transactions import ledger_transaction
from db.base import utcnow
from db.models.supplier import Supplier
from db.repositories.account_repository import AccountRepository
from db.repositories.supplier_repository import SupplierRepository
from db.repositories.types import Page, PageRequest, SupplierFilters
from ledger import suppliers as supplier_rules
from ledger.errors import DuplicateSupplierError, FieldValidationError

logger = logging.getLogger(__name__)

_UPDATABLE_TEXT_FIELDS = ("name", "country", "address", "contact_phone", "registration_number")


@dataclass(frozen=True)
class SupplierDetails:
    name: str
    country: str
    address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    registration_number: str | None = None


class SupplierService:
    def __init__(
        self,
        *,
        ledger_settings: LedgerSettings,
        settings: SupplierSettings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._ledger_settings = ledger_settings
        self._settings = settings
        self._clock = clock

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_supplier(self, *, db: Session, account_id: uuid.UUID, supplier_id: uuid.UUID) -> Supplier:
        return SupplierRepository(db).get_for_account(account_id, supplier_id)

    def list_suppliers(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        filters: SupplierFilters,
        page: int = 1,
        limit: int | None = None,
        sort_by: str = "name",
        descending: bool = False,
    ) -> Page[Supplier]:
        if limit is None:
            limit = self._ledger_settings.default_page_size
        request = PageRequest(
            page=max(1, page),
            limit=max(1, min(limit, self._ledger_settings.max_page_size)),
            sort_by=sort_by,
            descending=descending,
        )
        return SupplierRepository(db).list_for_account(account_id, filters=filters, page=request)

    def is_data_expired(self, supplier: Supplier, sector: str) -> bool:
        return supplier_rules.is_data_expired(
            supplier.carbon_intensity_data or [],
            sector,
            now=self._clock(),
            months_valid=self._settings.data_validity_months,
        )

    def valid_sectors(self, supplier: Supplier) -> list[str]:
        return supplier_rules.valid_sectors(
            supplier.carbon_intensity_data or [],
            now=self._clock(),
            months_valid=self._settings.data_validity_months,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_supplier(self, *, db: Session, account_id: uuid.UUID, details: SupplierDetails) -> Supplier:
        name = supplier_rules.clean_text("name", details.name, required=True)
        country = supplier_rules.clean_text("country", details.country, required=True)
        values = {
            "address": supplier_rules.clean_text("address", details.address),
            "contact_email": supplier_rules.clean_email(details.contact_email),
            "contact_phone": supplier_rules.clean_text("contact_phone", details.contact_phone),
            "registration_number": supplier_rules.clean_text(
                "registration_number", details.registration_number
            ),
        }

        with ledger_transaction(db):
            AccountRepository(db).ensure_account_exists(account_id)
            repository = SupplierRepository(db)
            if repository.find_by_name_country(account_id, name, country) is not None:
                raise DuplicateSupplierError(f"A supplier named {name!r} already exists in {country}.")
            supplier = Supplier(
                account_id=account_id,
                name=name,
                country=country,
                is_verified=False,
                carbon_intensity_data=[],
                **values,
            )
            repository.add(supplier)

        logger.info("Supplier created id=%s account_id=%s country=%s", supplier.id, account_id, country)
        return supplier

    def update_supplier(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        supplier_id: uuid.UUID,
        changes: dict[str, str | None],
    ) -> Supplier:
        """
        Update contact fields. ``None`` leaves a field unchanged; an empty
        string clears an optional field.
        """

        with ledger_transaction(db):
            supplier = SupplierRepository(db).get_for_account(account_id, supplier_id)
            for field, value in changes.items():
                if value is None:
                    continue
                if field == "contact_email":
                    supplier.contact_email = supplier_rules.clean_email(value)
                elif field in _UPDATABLE_TEXT_FIELDS:
                    required = field in ("name", "country")
                    setattr(supplier, field, supplier_rules.clean_text(field, value, required=required))
                else:
                    raise FieldValidationError(field, f"{field} cannot be changed.")
            db.flush()

        logger.info("Supplier updated id=%s fields=%s", supplier_id, sorted(changes))
        return supplier

    def set_verified(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        supplier_id: uuid.UUID,
        verified: bool,
    ) -> Supplier:
        with ledger_transaction(db):
            supplier = SupplierRepository(db).get_for_account(account_id, supplier_id)
            supplier.is_verified = verified

        logger.info("Supplier verification set id=%s verified=%s", supplier_id, verified)
        return supplier

    def upsert_intensity(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        supplier_id: uuid.UUID,
        sector: str,
        value: float,
        certificate: str | None = None,
    ) -> Supplier:
        with ledger_transaction(db):
            supplier = SupplierRepository(db).get_for_account(account_id, supplier_id)
            # Reassign so the JSON column is flagged as changed.
            supplier.carbon_intensity_data = supplier_rules.upsert_intensity(
                supplier.carbon_intensity_data or [],
                sector=sector,
                value=value,
                certificate=certificate,
                now=self._clock(),
            )

        logger.info("Supplier intensity recorded id=%s sector=%s", supplier_id, sector)
        return supplier

    def remove_intensity(
        self,
        *,
        db: Session,
        account_id: uuid.UUID,
        supplier_id: uuid.UUID,
        sector: str,
    ) -> Supplier:
        with ledger_transaction(db):
            supplier = SupplierRepository(db).get_for_account(account_id, supplier_id)
            supplier.carbon_intensity_data = supplier_rules.remove_intensity(
                supplier.carbon_intensity_data or [], sector
            )

        logger.info("Supplier intensity removed id=%s sector=%s", supplier_id, sector)
        return supplier

    def delete_supplier(self, *, db: Session, account_id: uuid.UUID, supplier_id: uuid.UUID) -> None:
        with ledger_transaction(db):
            repository = SupplierRepository(db)
            repository.delete(repository.get_for_account(account_id, supplier_id))

        logger.info("Supplier deleted id=%s account_id=%s", supplier_id, account_id)


def get_supplier_service() -> SupplierService:
    return SupplierService(
        ledger_settings=get_ledger_settings(),
        settings=get_supplier_settings(),
    )
