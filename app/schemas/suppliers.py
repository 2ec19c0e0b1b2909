"""
app/schemas/suppliers.py

Request and response schemas for the supplier directory.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import PaginationResponse


class SupplierCreateRequest(BaseModel):
    name: str
    country: str
    address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    registration_number: str | None = None


class SupplierUpdateRequest(BaseModel):
    name: str | None = None
    country: str | None = None
    address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    registration_number: str | None = None


class SupplierVerificationRequest(BaseModel):
    verified: bool


class IntensityRequest(BaseModel):
    value: float
    certificate: str | None = None


class IntensityEntryResponse(BaseModel):
    sector: str
    value: float
    verified_at: datetime
    certificate: str | None = None
    is_expired: bool


class SupplierResponse(BaseModel):
    id: uuid.UUID
    name: str
    country: str
    address: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    registration_number: str | None = None
    full_address: str
    contact_info: str
    is_verified: bool
    last_verified_at: datetime | None = None
    carbon_intensity_data: list[IntensityEntryResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class SupplierListResponse(BaseModel):
    items: list[SupplierResponse]
    pagination: PaginationResponse
