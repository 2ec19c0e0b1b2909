"""
app/schemas/imports.py

Request and response schemas for import lines and their documents.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import VersionedRequest
from db.models.import_line import CbamImport


class ImportLineCreateRequest(VersionedRequest):
    product_id: uuid.UUID
    supplier_name: str
    supplier_country: str
    quantity: float
    unit_value: float
    carbon_emissions: float
    carbon_certificates: float | None = None
    notes: str | None = None
    total_value: float | None = Field(
        default=None,
        description="Ignored; always recomputed as quantity * unit_value.",
    )


class ImportLineUpdateRequest(VersionedRequest):
    supplier_name: str | None = None
    supplier_country: str | None = None
    quantity: float | None = None
    unit_value: float | None = None
    carbon_emissions: float | None = None
    carbon_certificates: float | None = None
    notes: str | None = None
    status: str | None = None

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude={"expected_version"}, exclude_none=True)


class DocumentCreateRequest(VersionedRequest):
    name: str
    document_type: str
    url: str
    size_bytes: int


class DocumentResponse(BaseModel):
    id: uuid.UUID
    import_id: uuid.UUID
    name: str
    document_type: str
    url: str
    size_bytes: int
    uploaded_at: datetime

    model_config = {"from_attributes": True}


class ProductBriefResponse(BaseModel):
    id: uuid.UUID
    name: str
    cn_code: str
    sector: str
    carbon_intensity: float

    model_config = {"from_attributes": True}


class ImportLineResponse(BaseModel):
    id: uuid.UUID
    declaration_id: uuid.UUID
    product: ProductBriefResponse
    supplier_name: str
    supplier_country: str
    quantity: float
    unit_value: float
    total_value: float
    carbon_emissions: float
    carbon_certificates: float | None = None
    certificates_required: int
    certificate_deficit: float
    is_compliant: bool
    has_required_documents: bool
    status: str
    status_label: str
    notes: str | None = None
    documents: list[DocumentResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_model(cls, line: CbamImport) -> "ImportLineResponse":
        return cls.model_validate(line)


class ImportLineValidationResponse(BaseModel):
    import_id: uuid.UUID
    is_valid: bool
    problems: list[str] = Field(default_factory=list)
