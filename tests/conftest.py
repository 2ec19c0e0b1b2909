"""
tests/conftest.py

Shared fixtures: an in-memory SQLite database per test, ledger services
bound to a fixed clock, and a FastAPI TestClient using the same session.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from collections.abc import Iterator
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401  registers all ORM models on Base.metadata
from app.config import LedgerSettings, SupplierSettings
from app.services.dashboard_service import DashboardService
from app.services.declaration_service import DeclarationService
from app.services.import_line_service import ImportLineService
from app.services.supplier_service import SupplierService
from db.base import Base
from db.models.account import Account
from db.models.product import CbamProduct
from db.session import build_session_factory, enable_sqlite_foreign_keys
from ledger.imports import ImportLineCandidate
from ledger.vocabulary import Sector

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db(engine: Engine) -> Iterator[Session]:
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture()
def account(db: Session) -> Account:
    account = Account(name="Acme Imports", email="ops@acme.example", company="Acme GmbH")
    db.add(account)
    db.commit()
    return account


@pytest.fixture()
def other_account(db: Session) -> Account:
    account = Account(name="Other Trading", email="desk@other.example")
    db.add(account)
    db.commit()
    return account


@pytest.fixture()
def product(db: Session) -> CbamProduct:
    product = CbamProduct(
        name="Flat-rolled products of iron, in coils, hot-rolled",
        cn_code="72081000",
        sector=Sector.IRON_STEEL,
        carbon_intensity=2.05,
    )
    db.add(product)
    db.commit()
    return product


@pytest.fixture()
def second_product(db: Session) -> CbamProduct:
    product = CbamProduct(
        name="Cement clinkers",
        cn_code="25231000",
        sector=Sector.CEMENT,
        carbon_intensity=0.86,
    )
    db.add(product)
    db.commit()
    return product


@pytest.fixture()
def inactive_product(db: Session) -> CbamProduct:
    product = CbamProduct(
        name="Retired aluminium profile",
        cn_code="76042100",
        sector=Sector.ALUMINUM,
        carbon_intensity=9.8,
        is_active=False,
    )
    db.add(product)
    db.commit()
    return product


@pytest.fixture()
def declarations() -> DeclarationService:
    return DeclarationService(settings=LedgerSettings(), clock=fixed_clock)


@pytest.fixture()
def import_lines(declarations: DeclarationService) -> ImportLineService:
    return ImportLineService(declarations=declarations)


@pytest.fixture()
def suppliers() -> SupplierService:
    return SupplierService(
        ledger_settings=LedgerSettings(),
        settings=SupplierSettings(),
        clock=fixed_clock,
    )


@pytest.fixture()
def dashboard() -> DashboardService:
    return DashboardService(clock=fixed_clock)


@pytest.fixture()
def make_candidate(product: CbamProduct):
    def _make(**overrides) -> ImportLineCandidate:
        values = {
            "product_id": product.id,
            "supplier_name": "Anhui Steel Works",
            "supplier_country": "China",
            "quantity": 10.0,
            "unit_value": 100.0,
            "carbon_emissions": 5.0,
        }
        values.update(overrides)
        return ImportLineCandidate(**values)

    return _make


@pytest.fixture()
def client(
    db: Session,
    declarations: DeclarationService,
    import_lines: ImportLineService,
    suppliers: SupplierService,
    dashboard: DashboardService,
) -> Iterator[TestClient]:
    from app.main import create_app
    from app.services.dashboard_service import get_dashboard_service
    from app.services.declaration_service import get_declaration_service
    from app.services.import_line_service import get_import_line_service
    from app.services.supplier_service import get_supplier_service
    from db.session import get_db

    application = create_app(check_database=False)

    def _get_db() -> Iterator[Session]:
        yield db

    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_declaration_service] = lambda: declarations
    application.dependency_overrides[get_import_line_service] = lambda: import_lines
    application.dependency_overrides[get_supplier_service] = lambda: suppliers
    application.dependency_overrides[get_dashboard_service] = lambda: dashboard

    with TestClient(application) as test_client:
        yield test_client
