"""
Repository layer exports.
"""

from db.repositories.account_repository import AccountRepository
from db.repositories.declaration_repository import DeclarationRepository
from db.repositories.import_line_repository import ImportLineRepository
from db.repositories.product_repository import ProductRepository
from db.repositories.supplier_repository import SupplierRepository
from db.repositories.types import (
    DeclarationFilters,
    GroupTotals,
    ImportTotals,
    Page,
    PageRequest,
    ProductFilters,
    SupplierFilters,
)

__all__ = [
    "AccountRepository",
    "DeclarationRepository",
    "ImportLineRepository",
    "ProductRepository",
    "SupplierRepository",
    "DeclarationFilters",
    "ProductFilters",
    "SupplierFilters",
    "PageRequest",
    "Page",
    "GroupTotals",
    "ImportTotals",
]
