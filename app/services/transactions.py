"""
app/services/transactions.py

One-commit-per-command transaction scope shared by the ledger services.

Database failures that carry business meaning are translated into ledger
errors after the session has been rolled back:

    unique (account, year, quarter)      -> DuplicatePeriodError
    unique (account, name, country)      -> DuplicateSupplierError
    stale declaration version            -> ConcurrencyConflictError
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ledger.errors import (
    ConcurrencyConflictError,
    DuplicatePeriodError,
    DuplicateSupplierError,
)

# Constraint name (PostgreSQL) and column list (SQLite) per unique key.
_DUPLICATE_MARKERS: tuple[tuple[tuple[str, ...], type[Exception], str], ...] = (
    (
        ("uq_cbam_declarations_account_period", "cbam_declarations.reporting_year"),
        DuplicatePeriodError,
        "A declaration already exists for this reporting period.",
    ),
    (
        ("uq_suppliers_account_name_country", "suppliers.name"),
        DuplicateSupplierError,
        "A supplier with this name already exists in this country.",
    ),
)


def translate_integrity_error(exc: IntegrityError) -> Exception | None:
    message = str(exc.orig)
    for markers, error_cls, text in _DUPLICATE_MARKERS:
        if any(marker in message for marker in markers):
            return error_cls(text)
    return None


@contextmanager
def ledger_transaction(db: Session) -> Iterator[Session]:
    """
    Run the block in one transaction and commit on success.

    Any exception rolls the session back before it propagates.
    """

    try:
        yield db
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConcurrencyConflictError(
            "The declaration was modified concurrently. Reload it and retry."
        ) from exc
    except IntegrityError as exc:
        db.rollback()
        translated = translate_integrity_error(exc)
        if translated is None:
            raise
        raise translated from exc
    except Exception:
        db.rollback()
        raise
