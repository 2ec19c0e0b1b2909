"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class LedgerSettings:
    """
    Runtime settings for the declaration ledger.
    """

    min_year: int = 2023
    max_year_ahead: int = 1
    default_page_size: int = 10
    max_page_size: int = 100
    deadline_window_days: int = 30

    def max_year(self, today: date) -> int:
        return today.year + self.max_year_ahead


@dataclass(frozen=True)
class SupplierSettings:
    """
    Supplier directory settings.
    """

    data_validity_months: int = 12


@lru_cache(maxsize=1)
def get_ledger_settings() -> LedgerSettings:
    """
    Return cached ledger settings from environment variables.
    """

    default_page_size = max(1, _get_int_env("LEDGER_DEFAULT_PAGE_SIZE", 10))
    return LedgerSettings(
        min_year=_get_int_env("LEDGER_MIN_YEAR", 2023),
        max_year_ahead=max(0, _get_int_env("LEDGER_MAX_YEAR_AHEAD", 1)),
        default_page_size=default_page_size,
        max_page_size=max(default_page_size, _get_int_env("LEDGER_MAX_PAGE_SIZE", 100)),
        deadline_window_days=max(1, _get_int_env("LEDGER_DEADLINE_WINDOW_DAYS", 30)),
    )


@lru_cache(maxsize=1)
def get_supplier_settings() -> SupplierSettings:
    """
    Return cached supplier settings from environment variables.
    """

    return SupplierSettings(
        data_validity_months=max(1, _get_int_env("SUPPLIER_DATA_VALIDITY_MONTHS", 12)),
    )
