"""Bootstrap (composition root) for UBIQA.

Assembles the application at runtime: wires concrete adapters to service-layer
handlers, composes shared services (message bus, unit of work, clock, id
generator), and reads configuration for entrypoints.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain
  wiring details).
- This package may import: `ubiqa.adapters`, `ubiqa.service_layer`,
  `ubiqa.interfaces`, `ubiqa.domain`, and `ubiqa.config`.
- Inner layers must not import `ubiqa.bootstrap`.

Public surface:
- Re-export composition factories from this module; keep wiring helpers internal.
- No business rules live here; this is assembly and lifecycle only.
"""

from .bootstrap import AppContainer, bootstrap, build_message_bus, build_write_uow

__all__ = ["AppContainer", "bootstrap", "build_message_bus", "build_write_uow"]
