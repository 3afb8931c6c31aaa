"""Command-line interface for UBIQA."""
