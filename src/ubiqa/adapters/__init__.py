"""Adapters (infrastructure) for UBIQA.

Provide concrete implementations of the ports in `ubiqa.interfaces`
(repositories, unit of work, identity provider, clocks, ID generators,
redactors), plus persistence mapping and related wiring (engines, metadata,
migrations).

Dependency rule: may import `ubiqa.domain` and `ubiqa.interfaces`; neither
of them may import this package.
"""
