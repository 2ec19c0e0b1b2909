"""
ledger/summary.py

Declaration summary aggregation.

The summary of a declaration is always rebuilt from the full set of its
current import lines; it is never adjusted incrementally.

    total_imports               = N
    total_quantity              = sum(quantity)
    total_value                 = sum(total_value)
    total_emissions             = sum(carbon_emissions)
    total_certificates_required = sum(carbon_emissions)
    total_certificates_held     = sum(carbon_certificates or 0)

``total_certificates_required`` sums raw emissions and is not rounded,
whereas a single line reports ``ceil(carbon_emissions)``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any, Protocol


class ImportFigures(Protocol):
    quantity: float
    total_value: float
    carbon_emissions: float
    carbon_certificates: float | None


@dataclass(frozen=True)
class DeclarationSummary:
    total_imports: int = 0
    total_quantity: float = 0.0
    total_value: float = 0.0
    total_emissions: float = 0.0
    total_certificates_required: float = 0.0
    total_certificates_held: float = 0.0

    @property
    def certificate_deficit(self) -> float:
        return max(0.0, self.total_certificates_required - self.total_certificates_held)

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


EMPTY_SUMMARY = DeclarationSummary()

SUMMARY_FIELDS: tuple[str, ...] = tuple(EMPTY_SUMMARY.as_dict())


def summarize(lines: Iterable[ImportFigures]) -> DeclarationSummary:
    count = 0
    quantity = 0.0
    value = 0.0
    emissions = 0.0
    held = 0.0
    for line in lines:
        count += 1
        quantity += line.quantity
        value += line.total_value
        emissions += line.carbon_emissions
        held += line.carbon_certificates or 0

    return DeclarationSummary(
        total_imports=count,
        total_quantity=quantity,
        total_value=value,
        total_emissions=emissions,
        total_certificates_required=emissions,
        total_certificates_held=held,
    )


def read_summary(target: Any) -> DeclarationSummary:
    return DeclarationSummary(**{name: getattr(target, name) for name in SUMMARY_FIELDS})


def apply_summary(target: Any, summary: DeclarationSummary) -> None:
    for name, value in summary.as_dict().items():
        setattr(target, name, value)
