"""
app/schemas package marker.
"""

from app.schemas.common import PaginationResponse, VersionedRequest
from app.schemas.dashboard import DashboardResponse
from app.schemas.declarations import (
    DeclarationCreateRequest,
    DeclarationDetailResponse,
    DeclarationListResponse,
    DeclarationRejectRequest,
    DeclarationResponse,
    DeclarationUpdateRequest,
)
from app.schemas.imports import (
    DocumentCreateRequest,
    DocumentResponse,
    ImportLineCreateRequest,
    ImportLineResponse,
    ImportLineUpdateRequest,
    ImportLineValidationResponse,
)
from app.schemas.products import ProductListResponse, ProductResponse, SectorResponse
from app.schemas.suppliers import (
    IntensityRequest,
    SupplierCreateRequest,
    SupplierListResponse,
    SupplierResponse,
    SupplierUpdateRequest,
    SupplierVerificationRequest,
)

__all__ = [
    "PaginationResponse",
    "VersionedRequest",
    "DashboardResponse",
    "DeclarationCreateRequest",
    "DeclarationDetailResponse",
    "DeclarationListResponse",
    "DeclarationRejectRequest",
    "DeclarationResponse",
    "DeclarationUpdateRequest",
    "DocumentCreateRequest",
    "DocumentResponse",
    "ImportLineCreateRequest",
    "ImportLineResponse",
    "ImportLineUpdateRequest",
    "ImportLineValidationResponse",
    "ProductListResponse",
    "ProductResponse",
    "SectorResponse",
    "IntensityRequest",
    "SupplierCreateRequest",
    "SupplierListResponse",
    "SupplierResponse",
    "SupplierUpdateRequest",
    "SupplierVerificationRequest",
]
