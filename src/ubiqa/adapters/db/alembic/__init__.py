"""Alembic migration scripts for UBIQA's relational schema."""
