"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.account import Account
from db.models.declaration import CbamDeclaration
from db.models.import_line import CbamImport, ImportDocument
from db.models.product import CbamProduct
from db.models.supplier import Supplier

__all__ = [
    "Account",
    "CbamDeclaration",
    "CbamImport",
    "CbamProduct",
    "ImportDocument",
    "Supplier",
]
