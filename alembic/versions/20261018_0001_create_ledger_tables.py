"""create accounts, cbam_products, suppliers, cbam_declarations, cbam_imports, import_documents

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

JSON_DOCUMENT = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    # ---------------------------------------------------------------------------
    # accounts
    # No foreign keys. Created first; declarations and suppliers reference it.
    # ---------------------------------------------------------------------------
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=True),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            comment="Soft-disable an account without deletion",
        ),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_accounts_email"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_accounts_is_active", "accounts", ["is_active"])

    # ---------------------------------------------------------------------------
    # cbam_products
    # Reference data, keyed by CN code.
    # ---------------------------------------------------------------------------
    op.create_table(
        "cbam_products",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column(
            "cn_code",
            sa.String(length=8),
            nullable=False,
            comment="Combined nomenclature code, exactly 8 digits",
        ),
        sa.Column(
            "sector",
            sa.String(length=32),
            nullable=False,
            comment="cement, iron_steel, aluminum, fertilizers, electricity, hydrogen",
        ),
        sa.Column("carbon_intensity", sa.Float(), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "carbon_intensity >= 0 AND carbon_intensity <= 1000",
            name="ck_cbam_products_carbon_intensity",
        ),
        sa.UniqueConstraint("cn_code", name="uq_cbam_products_cn_code"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cbam_products_sector_active", "cbam_products", ["sector", "is_active"])

    # ---------------------------------------------------------------------------
    # suppliers
    # FK → accounts.id ON DELETE CASCADE
    # ---------------------------------------------------------------------------
    op.create_table(
        "suppliers",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("account_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("contact_phone", sa.String(length=20), nullable=True),
        sa.Column("registration_number", sa.String(length=50), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column(
            "carbon_intensity_data",
            JSON_DOCUMENT,
            nullable=False,
            comment="Per-sector verified intensity: sector, value, verified_at, certificate",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("account_id", "name", "country", name="uq_suppliers_account_name_country"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_suppliers_account_verified", "suppliers", ["account_id", "is_verified"])
    op.create_index("ix_suppliers_country", "suppliers", ["country"])

    # ---------------------------------------------------------------------------
    # cbam_declarations
    # FK → accounts.id ON DELETE CASCADE; one row per (account, year, quarter)
    # ---------------------------------------------------------------------------
    op.create_table(
        "cbam_declarations",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("account_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("reporting_year", sa.Integer(), nullable=False),
        sa.Column("reporting_quarter", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            comment="draft → submitted → validated | rejected → draft",
        ),
        sa.Column("total_imports", sa.Integer(), nullable=False),
        sa.Column("total_quantity", sa.Float(), nullable=False),
        sa.Column("total_value", sa.Float(), nullable=False),
        sa.Column("total_emissions", sa.Float(), nullable=False),
        sa.Column("total_certificates_required", sa.Float(), nullable=False),
        sa.Column("total_certificates_held", sa.Float(), nullable=False),
        sa.Column("deadline_date", sa.Date(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("validated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.String(length=1000), nullable=True),
        sa.Column("notes", sa.String(length=2000), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "account_id",
            "reporting_year",
            "reporting_quarter",
            name="uq_cbam_declarations_account_period",
        ),
        sa.CheckConstraint("reporting_quarter BETWEEN 1 AND 4", name="ck_cbam_declarations_quarter"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_cbam_declarations_account_status_deadline",
        "cbam_declarations",
        ["account_id", "status", "deadline_date"],
    )
    op.create_index(
        "ix_cbam_declarations_deadline_status",
        "cbam_declarations",
        ["deadline_date", "status"],
    )
    op.create_index("ix_cbam_declarations_created_at", "cbam_declarations", ["created_at"])

    # ---------------------------------------------------------------------------
    # cbam_imports
    # FK → cbam_declarations.id ON DELETE CASCADE, cbam_products.id ON DELETE RESTRICT
    # ---------------------------------------------------------------------------
    op.create_table(
        "cbam_imports",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("declaration_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("product_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("supplier_name", sa.String(length=200), nullable=False),
        sa.Column("supplier_country", sa.String(length=100), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False, comment="tonnes"),
        sa.Column("unit_value", sa.Float(), nullable=False, comment="currency per tonne"),
        sa.Column("total_value", sa.Float(), nullable=False),
        sa.Column("carbon_emissions", sa.Float(), nullable=False, comment="tCO2e"),
        sa.Column("carbon_certificates", sa.Float(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["declaration_id"], ["cbam_declarations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["cbam_products.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_cbam_imports_declaration_status",
        "cbam_imports",
        ["declaration_id", "status"],
    )
    op.create_index(
        "ix_cbam_imports_declaration_created",
        "cbam_imports",
        ["declaration_id", "created_at"],
    )
    op.create_index(
        "ix_cbam_imports_product_country",
        "cbam_imports",
        ["product_id", "supplier_country"],
    )
    op.create_index(
        "ix_cbam_imports_supplier",
        "cbam_imports",
        ["supplier_name", "supplier_country"],
    )

    # ---------------------------------------------------------------------------
    # import_documents
    # FK → cbam_imports.id ON DELETE CASCADE
    # ---------------------------------------------------------------------------
    op.create_table(
        "import_documents",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("import_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "document_type",
            sa.String(length=20),
            nullable=False,
            comment="invoice, certificate, customs, other",
        ),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("size_bytes", sa.BigInteger(), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["import_id"], ["cbam_imports.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_import_documents_import_id", "import_documents", ["import_id"])


def downgrade() -> None:
    op.drop_index("ix_import_documents_import_id", table_name="import_documents")
    op.drop_table("import_documents")

    op.drop_index("ix_cbam_imports_supplier", table_name="cbam_imports")
    op.drop_index("ix_cbam_imports_product_country", table_name="cbam_imports")
    op.drop_index("ix_cbam_imports_declaration_created", table_name="cbam_imports")
    op.drop_index("ix_cbam_imports_declaration_status", table_name="cbam_imports")
    op.drop_table("cbam_imports")

    op.drop_index("ix_cbam_declarations_created_at", table_name="cbam_declarations")
    op.drop_index("ix_cbam_declarations_deadline_status", table_name="cbam_declarations")
    op.drop_index("ix_cbam_declarations_account_status_deadline", table_name="cbam_declarations")
    op.drop_table("cbam_declarations")

    op.drop_index("ix_suppliers_country", table_name="suppliers")
    op.drop_index("ix_suppliers_account_verified", table_name="suppliers")
    op.drop_table("suppliers")

    op.drop_index("ix_cbam_products_sector_active", table_name="cbam_products")
    op.drop_table("cbam_products")

    op.drop_index("ix_accounts_is_active", table_name="accounts")
    op.drop_table("accounts")
