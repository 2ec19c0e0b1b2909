"""
app/services package marker.
"""

from app.services.account_service import AccountService, get_account_service
from app.services.dashboard_service import DashboardService, get_dashboard_service
from app.services.declaration_service import DeclarationService, get_declaration_service
from app.services.import_line_service import ImportLineService, get_import_line_service
from app.services.product_service import ProductService, get_product_service
from app.services.supplier_service import SupplierService, get_supplier_service

__all__ = [
    "AccountService",
    "get_account_service",
    "DashboardService",
    "get_dashboard_service",
    "DeclarationService",
    "get_declaration_service",
    "ImportLineService",
    "get_import_line_service",
    "ProductService",
    "get_product_service",
    "SupplierService",
    "get_supplier_service",
]
