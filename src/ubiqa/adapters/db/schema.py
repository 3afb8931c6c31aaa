"""Relational schema for accounts, properties, listings and payments.

Each table stores the entity's camelCase record in a ``document`` JSON column,
which is the source of truth when loading. A handful of scalar columns are
copied out of the record on every write so that ownership, status, search
and expiry queries can use indexes.

| Table        | Links                                | Query columns                                            |
|--------------|--------------------------------------|----------------------------------------------------------|
| accounts     |                                      | email (unique), is_active                                |
| properties   | owner_id -> accounts                 | property_type, operation_type, is_available, lat, lon    |
| listings     | owner_id -> accounts, property_id -> properties | status, currency_code, price_amount, published_at, expires_at |
| payments     | listing_id -> listings, payer_id -> accounts    | status, expires_at                             |
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    String,
    Table,
)

from ubiqa.adapters.db.metadata import metadata
from ubiqa.adapters.db.sa_types import MONEY, PORTABLE_JSON, UTCDateTime

__all__ = ["accounts", "listings", "payments", "properties"]

ID_LENGTH = 128

accounts = Table(
    "accounts",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("email", String(320), nullable=False, unique=True),
    Column("is_active", Boolean, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column(
        "document",
        PORTABLE_JSON,
        nullable=False,
        comment="Account record (camelCase keys).",
    ),
    comment="Platform users; ids come from the identity provider.",
)

properties = Table(
    "properties",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column(
        "owner_id",
        String(ID_LENGTH),
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    ),
    Column("property_type", String(32), nullable=False),
    Column("operation_type", String(32), nullable=False),
    Column("is_available", Boolean, nullable=False),
    Column("lat", Float, nullable=False),
    Column("lon", Float, nullable=False),
    Column(
        "created_at",
        UTCDateTime(),
        nullable=False,
        comment="Kept beside the record, which has no createdAt key.",
    ),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("document", PORTABLE_JSON, nullable=False),
    Index(None, "property_type", "operation_type"),
    comment="Physical real-estate assets, reusable across listings.",
)

listings = Table(
    "listings",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column(
        "owner_id",
        String(ID_LENGTH),
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    ),
    Column(
        "property_id",
        String(ID_LENGTH),
        ForeignKey("properties.id"),
        nullable=False,
        index=True,
    ),
    Column("status", String(32), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("price_amount", MONEY, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("published_at", UTCDateTime(), nullable=True),
    Column("expires_at", UTCDateTime(), nullable=True),
    Column("document", PORTABLE_JSON, nullable=False),
    CheckConstraint("price_amount > 0", name="positive_price"),
    CheckConstraint(
        "status <> 'active' OR (published_at IS NOT NULL AND expires_at IS NOT NULL)",
        name="active_has_window",
    ),
    Index(None, "status", "expires_at"),
    Index(None, "status", "currency_code", "price_amount"),
    comment="Time-bound paid publications of a property.",
)

payments = Table(
    "payments",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column(
        "listing_id",
        String(ID_LENGTH),
        ForeignKey("listings.id"),
        nullable=False,
        index=True,
    ),
    Column(
        "payer_id",
        String(ID_LENGTH),
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    ),
    Column("status", String(32), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("expires_at", UTCDateTime(), nullable=True),
    Column("document", PORTABLE_JSON, nullable=False),
    Index(None, "status", "expires_at"),
    comment="One-time listing fee transactions.",
)
