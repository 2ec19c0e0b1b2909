"""
ledger/suppliers.py

Supplier field rules and per-sector carbon-intensity bookkeeping.

Intensity entries are plain dicts so they can be stored as a JSON list:

    {"sector": "cement", "value": 0.8, "verified_at": "<iso>", "certificate": "..."}
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from ledger.deadlines import add_months
from ledger.errors import FieldValidationError
from ledger.vocabulary import Sector

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_INTENSITY = 1000.0
DEFAULT_VALIDITY_MONTHS = 12

_TEXT_LIMITS: dict[str, int] = {
    "name": 200,
    "country": 100,
    "address": 500,
    "contact_phone": 20,
    "registration_number": 50,
}


def clean_text(field: str, value: str | None, *, required: bool = False) -> str | None:
    if value is None or not value.strip():
        if required:
            raise FieldValidationError(field, f"{field} is required.")
        return None
    cleaned = value.strip()
    limit = _TEXT_LIMITS.get(field)
    if limit is not None and len(cleaned) > limit:
        raise FieldValidationError(field, f"{field} must be at most {limit} characters.")
    return cleaned


def clean_email(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    cleaned = value.strip().lower()
    if not _EMAIL_PATTERN.match(cleaned):
        raise FieldValidationError("contact_email", "contact_email is not a valid email address.")
    return cleaned


def upsert_intensity(
    entries: list[dict[str, Any]],
    *,
    sector: str,
    value: float,
    certificate: str | None,
    now: datetime,
) -> list[dict[str, Any]]:
    """Return a new entry list where ``sector`` carries the given value."""

    if sector not in Sector.ALL:
        raise FieldValidationError("sector", f"sector must be one of {list(Sector.ALL)}.")
    if not 0 <= value <= MAX_INTENSITY:
        raise FieldValidationError("value", f"value must be between 0 and {MAX_INTENSITY:g}.")
    if certificate is not None and len(certificate.strip()) > 500:
        raise FieldValidationError("certificate", "certificate must be at most 500 characters.")

    kept = [entry for entry in entries if entry.get("sector") != sector]
    kept.append(
        {
            "sector": sector,
            "value": value,
            "verified_at": now.isoformat(),
            "certificate": certificate.strip() if certificate else None,
        }
    )
    return kept


def remove_intensity(entries: list[dict[str, Any]], sector: str) -> list[dict[str, Any]]:
    return [entry for entry in entries if entry.get("sector") != sector]


def intensity_for_sector(entries: list[dict[str, Any]], sector: str) -> dict[str, Any] | None:
    return next((entry for entry in entries if entry.get("sector") == sector), None)


def is_data_expired(
    entries: list[dict[str, Any]],
    sector: str,
    *,
    now: datetime,
    months_valid: int = DEFAULT_VALIDITY_MONTHS,
) -> bool:
    entry = intensity_for_sector(entries, sector)
    if entry is None:
        return True
    verified_at = datetime.fromisoformat(entry["verified_at"])
    return now > add_months(verified_at, months_valid)


def valid_sectors(
    entries: list[dict[str, Any]],
    *,
    now: datetime,
    months_valid: int = DEFAULT_VALIDITY_MONTHS,
) -> list[str]:
    return [
        entry["sector"]
        for entry in entries
        if not is_data_expired(entries, entry["sector"], now=now, months_valid=months_valid)
    ]


def latest_verification(entries: list[dict[str, Any]]) -> datetime | None:
    if not entries:
        return None
    return max(datetime.fromisoformat(entry["verified_at"]) for entry in entries)
