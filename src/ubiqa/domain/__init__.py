"""Domain layer for UBIQA.

Contains business rules: value objects, entities with their lifecycle state
machines, per-entity domain services, cross-entity validation and the
orchestrator that coordinates multi-entity workflows. This package is
deliberately technology-agnostic and free of I/O; the current time is the
only ambient input and every operation accepts it explicitly.

Dependency rule: do not import from `ubiqa.interfaces`, `ubiqa.adapters`,
`ubiqa.service_layer` or `ubiqa.entrypoints`.
"""
