"""UBIQA test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- integration/  : Real interactions with SQLite databases and Alembic migrations.
- fixtures/     : Shared pytest fixtures (entity builders, engines); no tests here.

General guidance
- Keep unit fast and deterministic: no real I/O, and time always comes from a
  fixed clock or an explicit `now`.
- Prefer the in-memory adapters over mocks at boundaries.
- Integration hits a real database with realistic setup/teardown.
- Property-based tests (hypothesis) live with the layer they exercise.
"""
