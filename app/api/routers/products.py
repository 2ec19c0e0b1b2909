"""
app/api/routers/products.py

Read-only CBAM product reference data.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.schemas.common import PaginationResponse
from app.schemas.products import ProductListResponse, ProductResponse, SectorResponse
from app.services.product_service import ProductService, get_product_service
from db.repositories.types import ProductFilters
from db.session import get_db
from ledger.errors import LedgerError

router = APIRouter(tags=["products"])


@router.get("/products", response_model=ProductListResponse)
def list_products(
    sector: str | None = Query(default=None),
    search: str | None = Query(default=None),
    active_only: bool = Query(default=True),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort_by: str = Query(default="name"),
    sort_order: Literal["asc", "desc"] = Query(default="asc"),
    db: Session = Depends(get_db),
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    try:
        result = service.list_products(
            db=db,
            filters=ProductFilters(sector=sector, search=search, active_only=active_only),
            page=page,
            limit=limit,
            sort_by=sort_by,
            descending=sort_order == "desc",
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return ProductListResponse(
        items=[ProductResponse.model_validate(item) for item in result.items],
        pagination=PaginationResponse.from_page(result),
    )


@router.get("/products/{cn_code}", response_model=ProductResponse)
def get_product(
    cn_code: str,
    db: Session = Depends(get_db),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    try:
        product = service.get_by_cn_code(db=db, cn_code=cn_code)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return ProductResponse.model_validate(product)


@router.get("/sectors", response_model=list[SectorResponse])
def list_sectors(
    db: Session = Depends(get_db),
    service: ProductService = Depends(get_product_service),
) -> list[SectorResponse]:
    return [SectorResponse.model_validate(sector) for sector in service.list_sectors(db=db)]
