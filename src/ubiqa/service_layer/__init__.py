"""Service layer for UBIQA.

Implements application use-cases: command handlers, read-side queries, and
transaction boundaries. Handlers load entities through the unit of work, run
the domain orchestrator or per-entity services, and persist what they return.

Dependency rule: may import `ubiqa.domain` and `ubiqa.interfaces`, but not
`ubiqa.adapters` or `ubiqa.entrypoints`.
"""
