"""Integration tests.

Purpose
- Exercise the SQLAlchemy repositories, the unit of work, Alembic migrations
  and the CLI against real SQLite databases.

Guidelines
- Use a fresh database per test (in-memory, or a file under ``tmp_path``).
- Minimize mocking; go through the same adapters production uses.
- Marked 'integration' automatically; slower than unit tests but reliable.
"""
