"""
app/schemas/products.py

Response schemas for CBAM product reference data.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel

from app.schemas.common import PaginationResponse


class ProductResponse(BaseModel):
    id: uuid.UUID
    name: str
    cn_code: str
    sector: str
    sector_label: str
    carbon_intensity: float
    description: str | None = None
    is_active: bool

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    pagination: PaginationResponse


class SectorResponse(BaseModel):
    value: str
    label: str

    model_config = {"from_attributes": True}
