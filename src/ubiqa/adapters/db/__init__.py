"""Relational persistence wiring: engine, metadata, column types, schema."""
