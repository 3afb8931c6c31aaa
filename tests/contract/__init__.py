"""Contract tests.

Each port (repositories, unit of work, id generators) states its behavior
once here, and the suite runs against every adapter for that port so the
in-memory and SQLAlchemy backends stay interchangeable.

Guidelines
- Select implementations through parametrized fixtures.
- Assert only what callers can observe through the port.
"""
