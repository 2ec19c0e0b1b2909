"""
ledger/deadlines.py

Reporting-period rules and the regulatory deadline table.

Deadlines
---------
Q1 -> 31 May of the reporting year
Q2 -> 31 August of the reporting year
Q3 -> 30 November of the reporting year
Q4 -> 28 February of the following year (leap years are not adjusted)
"""

from __future__ import annotations

from datetime import date, datetime

from ledger.errors import InvalidPeriodError
from ledger.vocabulary import DeclarationStatus

MIN_REPORTING_YEAR = 2023

# quarter -> (year offset, month, day)
_DEADLINE_TABLE: dict[int, tuple[int, int, int]] = {
    1: (0, 5, 31),
    2: (0, 8, 31),
    3: (0, 11, 30),
    4: (1, 2, 28),
}


def validate_period(
    year: int,
    quarter: int,
    *,
    min_year: int = MIN_REPORTING_YEAR,
    max_year: int | None = None,
) -> None:
    """
    Reject quarters outside 1..4 and years outside [min_year, max_year].

    ``max_year`` is open-ended when omitted.
    """

    if quarter not in _DEADLINE_TABLE:
        raise InvalidPeriodError(f"Quarter must be between 1 and 4, got {quarter}.")
    if year < min_year:
        raise InvalidPeriodError(f"Year must be {min_year} or later, got {year}.")
    if max_year is not None and year > max_year:
        raise InvalidPeriodError(f"Year must be {max_year} or earlier, got {year}.")


def deadline_for(year: int, quarter: int) -> date:
    """Return the filing deadline of the (year, quarter) reporting period."""

    validate_period(year, quarter)
    year_offset, month, day = _DEADLINE_TABLE[quarter]
    return date(year + year_offset, month, day)


def period_label(year: int, quarter: int) -> str:
    return f"Q{quarter} {year}"


def next_regulatory_deadline(today: date) -> date:
    """
    First deadline of the fixed table that falls strictly after ``today``.

    The Q4 deadline of the previous year lands in February of the current
    year, so it is part of the candidate set.
    """

    candidates = [
        date(year + offset, month, day)
        for year in (today.year - 1, today.year)
        for offset, month, day in _DEADLINE_TABLE.values()
    ]
    return min(candidate for candidate in candidates if candidate > today)


def days_until_deadline(deadline: date, today: date) -> int:
    """Whole days left before the deadline; negative once it has passed."""

    return (deadline - today).days


def is_overdue(deadline: date, status: str, today: date) -> bool:
    return today > deadline and status != DeclarationStatus.VALIDATED


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by whole calendar months, clamping the day to the target month."""

    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    for day in (moment.day, 30, 29, 28):
        try:
            return moment.replace(year=year, month=month, day=day)
        except ValueError:
            continue
    raise ValueError(f"Cannot shift {moment!r} by {months} months")
