"""
ledger/vocabulary.py

Fixed vocabularies shared by the ledger core, the ORM models and the API.
"""

from __future__ import annotations


class DeclarationStatus:
    """Declaration workflow states."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    VALIDATED = "validated"
    REJECTED = "rejected"
    PENDING = "pending"

    ALL = (DRAFT, SUBMITTED, VALIDATED, REJECTED, PENDING)


class ImportStatus:
    """Processing state of one import line."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    ALL = (PENDING, PROCESSING, COMPLETED, ERROR)


class DocumentType:
    INVOICE = "invoice"
    CERTIFICATE = "certificate"
    CUSTOMS = "customs"
    OTHER = "other"

    ALL = (INVOICE, CERTIFICATE, CUSTOMS, OTHER)


class Sector:
    """CBAM goods categories a product can belong to."""

    CEMENT = "cement"
    IRON_STEEL = "iron_steel"
    ALUMINUM = "aluminum"
    FERTILIZERS = "fertilizers"
    ELECTRICITY = "electricity"
    HYDROGEN = "hydrogen"

    ALL = (CEMENT, IRON_STEEL, ALUMINUM, FERTILIZERS, ELECTRICITY, HYDROGEN)


DECLARATION_STATUS_LABELS: dict[str, str] = {
    DeclarationStatus.DRAFT: "Draft",
    DeclarationStatus.SUBMITTED: "Submitted",
    DeclarationStatus.VALIDATED: "Validated",
    DeclarationStatus.REJECTED: "Rejected",
    DeclarationStatus.PENDING: "Pending",
}

IMPORT_STATUS_LABELS: dict[str, str] = {
    ImportStatus.PENDING: "Pending",
    ImportStatus.PROCESSING: "Processing",
    ImportStatus.COMPLETED: "Completed",
    ImportStatus.ERROR: "Error",
}

SECTOR_LABELS: dict[str, str] = {
    Sector.CEMENT: "Cement",
    Sector.IRON_STEEL: "Iron and steel",
    Sector.ALUMINUM: "Aluminium",
    Sector.FERTILIZERS: "Fertilisers",
    Sector.ELECTRICITY: "Electricity",
    Sector.HYDROGEN: "Hydrogen",
}


def sector_label(sector: str) -> str:
    return SECTOR_LABELS.get(sector, sector)
