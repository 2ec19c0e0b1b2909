"""
app/api/routers package marker.
"""

from app.api.routers.accounts import router as accounts_router
from app.api.routers.dashboard import router as dashboard_router
from app.api.routers.declarations import router as declarations_router
from app.api.routers.imports import router as imports_router
from app.api.routers.products import router as products_router
from app.api.routers.suppliers import router as suppliers_router

__all__ = [
    "accounts_router",
    "dashboard_router",
    "declarations_router",
    "imports_router",
    "products_router",
    "suppliers_router",
]
