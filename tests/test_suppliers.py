"""
tests/test_suppliers.py

Pytest tests for supplier rules (ledger.suppliers) and SupplierService.

Coverage
--------
- Text and email cleaning
- Intensity upsert / removal / expiry
- Service: create, duplicate name+country, account scoping, partial update,
  verification flag, intensity bookkeeping, delete
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

from app.services.supplier_service import SupplierDetails, SupplierService
from db.models.account import Account
from db.repositories.types import SupplierFilters
from ledger import suppliers as supplier_rules
from ledger.errors import DuplicateSupplierError, FieldValidationError, NotFoundError
from ledger.vocabulary import Sector

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


class TestFieldRules:
    def test_clean_text_strips(self) -> None:
        assert supplier_rules.clean_text("name", "  Anhui Steel  ", required=True) == "Anhui Steel"

    def test_clean_text_required(self) -> None:
        with pytest.raises(FieldValidationError):
            supplier_rules.clean_text("country", " ", required=True)

    def test_clean_text_optional_empty(self) -> None:
        assert supplier_rules.clean_text("address", "") is None

    def test_clean_text_limit(self) -> None:
        with pytest.raises(FieldValidationError):
            supplier_rules.clean_text("contact_phone", "1" * 21)

    def test_clean_email_lowercases(self) -> None:
        assert supplier_rules.clean_email(" Sales@Anhui.CN ") == "sales@anhui.cn"

    def test_clean_email_rejects_garbage(self) -> None:
        with pytest.raises(FieldValidationError) as excinfo:
            supplier_rules.clean_email("not-an-email")
        assert excinfo.value.field == "contact_email"


class TestIntensity:
    def test_upsert_replaces_sector_entry(self) -> None:
        entries = supplier_rules.upsert_intensity([], sector=Sector.CEMENT, value=0.8, certificate=None, now=NOW)
        entries = supplier_rules.upsert_intensity(
            entries, sector=Sector.CEMENT, value=0.7, certificate=" ISO-14064 ", now=NOW
        )
        assert len(entries) == 1
        assert entries[0]["value"] == 0.7
        assert entries[0]["certificate"] == "ISO-14064"

    def test_upsert_rejects_unknown_sector(self) -> None:
        with pytest.raises(FieldValidationError):
            supplier_rules.upsert_intensity([], sector="textiles", value=1.0, certificate=None, now=NOW)

    def test_upsert_rejects_out_of_range(self) -> None:
        with pytest.raises(FieldValidationError):
            supplier_rules.upsert_intensity([], sector=Sector.CEMENT, value=1000.1, certificate=None, now=NOW)

    def test_remove(self) -> None:
        entries = supplier_rules.upsert_intensity([], sector=Sector.CEMENT, value=0.8, certificate=None, now=NOW)
        assert supplier_rules.remove_intensity(entries, Sector.CEMENT) == []

    def test_missing_sector_is_expired(self) -> None:
        assert supplier_rules.is_data_expired([], Sector.CEMENT, now=NOW)

    def test_expiry_after_validity_window(self) -> None:
        verified = datetime(2023, 6, 1, tzinfo=timezone.utc)
        entries = supplier_rules.upsert_intensity(
            [], sector=Sector.HYDROGEN, value=9.0, certificate=None, now=verified
        )
        assert not supplier_rules.is_data_expired(entries, Sector.HYDROGEN, now=datetime(2024, 5, 31, tzinfo=timezone.utc))
        assert supplier_rules.is_data_expired(entries, Sector.HYDROGEN, now=NOW)
        assert supplier_rules.valid_sectors(entries, now=NOW) == []

    def test_latest_verification(self) -> None:
        first = datetime(2024, 1, 1, tzinfo=timezone.utc)
        entries = supplier_rules.upsert_intensity([], sector=Sector.CEMENT, value=0.8, certificate=None, now=first)
        entries = supplier_rules.upsert_intensity(entries, sector=Sector.ALUMINUM, value=8.0, certificate=None, now=NOW)
        assert supplier_rules.latest_verification(entries) == NOW
        assert supplier_rules.latest_verification([]) is None


# ---------------------------------------------------------------------------
# SupplierService
# ---------------------------------------------------------------------------


def _details(**overrides) -> SupplierDetails:
    values = {"name": "Anhui Steel Works", "country": "China", "contact_email": "Sales@Anhui.cn"}
    values.update(overrides)
    return SupplierDetails(**values)


class TestSupplierService:
    def test_create(self, db: Session, account: Account, suppliers: SupplierService) -> None:
        supplier = suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        assert supplier.id is not None
        assert supplier.contact_email == "sales@anhui.cn"
        assert supplier.is_verified is False
        assert supplier.carbon_intensity_data == []
        assert supplier.last_verified_at is None

    def test_duplicate_name_and_country(self, db: Session, account: Account, suppliers: SupplierService) -> None:
        suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        with pytest.raises(DuplicateSupplierError):
            suppliers.create_supplier(db=db, account_id=account.id, details=_details(contact_email=None))

    def test_same_name_other_country_allowed(
        self, db: Session, account: Account, suppliers: SupplierService
    ) -> None:
        suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        other = suppliers.create_supplier(db=db, account_id=account.id, details=_details(country="India"))
        assert other.country == "India"

    def test_scoped_to_account(
        self, db: Session, account: Account, other_account: Account, suppliers: SupplierService
    ) -> None:
        supplier = suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        with pytest.raises(NotFoundError):
            suppliers.get_supplier(db=db, account_id=other_account.id, supplier_id=supplier.id)

    def test_update_partial(self, db: Session, account: Account, suppliers: SupplierService) -> None:
        supplier = suppliers.create_supplier(
            db=db, account_id=account.id, details=_details(address="Ma'anshan")
        )
        updated = suppliers.update_supplier(
            db=db,
            account_id=account.id,
            supplier_id=supplier.id,
            changes={"address": "", "contact_phone": "+86 555 0100", "name": None},
        )
        assert updated.address is None
        assert updated.contact_phone == "+86 555 0100"
        assert updated.name == "Anhui Steel Works"

    def test_update_rejects_unknown_field(self, db: Session, account: Account, suppliers: SupplierService) -> None:
        supplier = suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        with pytest.raises(FieldValidationError):
            suppliers.update_supplier(
                db=db, account_id=account.id, supplier_id=supplier.id, changes={"is_verified": "yes"}
            )

    def test_verification(self, db: Session, account: Account, suppliers: SupplierService) -> None:
        supplier = suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        supplier = suppliers.set_verified(db=db, account_id=account.id, supplier_id=supplier.id, verified=True)
        assert supplier.is_verified is True

    def test_intensity_bookkeeping(self, db: Session, account: Account, suppliers: SupplierService) -> None:
        supplier = suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        suppliers.upsert_intensity(
            db=db, account_id=account.id, supplier_id=supplier.id, sector=Sector.IRON_STEEL, value=1.9
        )
        db.expire_all()
        supplier = suppliers.get_supplier(db=db, account_id=account.id, supplier_id=supplier.id)
        assert [entry["sector"] for entry in supplier.carbon_intensity_data] == [Sector.IRON_STEEL]
        verified_at = supplier.carbon_intensity_data[0]["verified_at"]
        assert supplier.last_verified_at == datetime.fromisoformat(verified_at)
        assert suppliers.valid_sectors(supplier) == [Sector.IRON_STEEL]
        assert suppliers.is_data_expired(supplier, Sector.CEMENT)

        suppliers.remove_intensity(
            db=db, account_id=account.id, supplier_id=supplier.id, sector=Sector.IRON_STEEL
        )
        db.expire_all()
        supplier = suppliers.get_supplier(db=db, account_id=account.id, supplier_id=supplier.id)
        assert supplier.carbon_intensity_data == []
        assert supplier.last_verified_at is None

    def test_list_filters(self, db: Session, account: Account, suppliers: SupplierService) -> None:
        suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        suppliers.create_supplier(db=db, account_id=account.id, details=_details(name="Tata Steel", country="India", contact_email=None))
        page = suppliers.list_suppliers(db=db, account_id=account.id, filters=SupplierFilters(country="India"))
        assert page.total == 1
        assert page.items[0].name == "Tata Steel"

        page = suppliers.list_suppliers(db=db, account_id=account.id, filters=SupplierFilters(search="anhui"))
        assert [supplier.name for supplier in page.items] == ["Anhui Steel Works"]

    def test_delete(self, db: Session, account: Account, suppliers: SupplierService) -> None:
        supplier = suppliers.create_supplier(db=db, account_id=account.id, details=_details())
        suppliers.delete_supplier(db=db, account_id=account.id, supplier_id=supplier.id)
        with pytest.raises(NotFoundError):
            suppliers.get_supplier(db=db, account_id=account.id, supplier_id=supplier.id)
