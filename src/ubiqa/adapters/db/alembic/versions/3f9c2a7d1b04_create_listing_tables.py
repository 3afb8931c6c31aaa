"""create accounts, properties, listings and payments tables

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2026-10-19 09:12:41.503117

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from ubiqa.adapters.db.sa_types import MONEY, PORTABLE_JSON, UTCDateTime

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f9c2a7d1b04"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.Column(
            "document",
            PORTABLE_JSON,
            nullable=False,
            comment="Account record (camelCase keys).",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_accounts")),
        sa.UniqueConstraint("email", name=op.f("uq_accounts_email")),
        comment="Platform users; ids come from the identity provider.",
    )

    op.create_table(
        "properties",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("owner_id", sa.String(length=128), nullable=False),
        sa.Column("property_type", sa.String(length=32), nullable=False),
        sa.Column("operation_type", sa.String(length=32), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        sa.Column(
            "created_at",
            UTCDateTime(),
            nullable=False,
            comment="Kept beside the record, which has no createdAt key.",
        ),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.Column("document", PORTABLE_JSON, nullable=False),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["accounts.id"],
            name=op.f("fk_properties_owner_id_accounts"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_properties")),
        comment="Physical real-estate assets, reusable across listings.",
    )
    op.create_index(
        op.f("ix_properties_owner_id"), "properties", ["owner_id"], unique=False
    )
    op.create_index(
        op.f("ix_properties_property_type_operation_type"),
        "properties",
        ["property_type", "operation_type"],
        unique=False,
    )

    op.create_table(
        "listings",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("owner_id", sa.String(length=128), nullable=False),
        sa.Column("property_id", sa.String(length=128), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("currency_code", sa.String(length=3), nullable=False),
        sa.Column("price_amount", MONEY, nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.Column("published_at", UTCDateTime(), nullable=True),
        sa.Column("expires_at", UTCDateTime(), nullable=True),
        sa.Column("document", PORTABLE_JSON, nullable=False),
        sa.CheckConstraint(
            "price_amount > 0", name=op.f("ck_listings_positive_price")
        ),
        sa.CheckConstraint(
            "status <> 'active' OR "
            "(published_at IS NOT NULL AND expires_at IS NOT NULL)",
            name=op.f("ck_listings_active_has_window"),
        ),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["accounts.id"],
            name=op.f("fk_listings_owner_id_accounts"),
        ),
        sa.ForeignKeyConstraint(
            ["property_id"],
            ["properties.id"],
            name=op.f("fk_listings_property_id_properties"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_listings")),
        comment="Time-bound paid publications of a property.",
    )
    op.create_index(op.f("ix_listings_owner_id"), "listings", ["owner_id"])
    op.create_index(op.f("ix_listings_property_id"), "listings", ["property_id"])
    op.create_index(
        op.f("ix_listings_status_expires_at"), "listings", ["status", "expires_at"]
    )
    op.create_index(
        op.f("ix_listings_status_currency_code_price_amount"),
        "listings",
        ["status", "currency_code", "price_amount"],
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("listing_id", sa.String(length=128), nullable=False),
        sa.Column("payer_id", sa.String(length=128), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.Column("expires_at", UTCDateTime(), nullable=True),
        sa.Column("document", PORTABLE_JSON, nullable=False),
        sa.ForeignKeyConstraint(
            ["listing_id"],
            ["listings.id"],
            name=op.f("fk_payments_listing_id_listings"),
        ),
        sa.ForeignKeyConstraint(
            ["payer_id"],
            ["accounts.id"],
            name=op.f("fk_payments_payer_id_accounts"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_payments")),
        comment="One-time listing fee transactions.",
    )
    op.create_index(op.f("ix_payments_listing_id"), "payments", ["listing_id"])
    op.create_index(op.f("ix_payments_payer_id"), "payments", ["payer_id"])
    op.create_index(
        op.f("ix_payments_status_expires_at"), "payments", ["status", "expires_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("payments")
    op.drop_table("listings")
    op.drop_table("properties")
    op.drop_table("accounts")
