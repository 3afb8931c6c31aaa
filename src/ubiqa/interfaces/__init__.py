"""Interfaces (application boundary) for UBIQA.

Defines framework-free application contracts: ABCs and small DTOs shared by
the service layer and adapters (repositories, unit of work, identity
provider, clocks, ID generators, redactors). Business rules stay out of this
package.

Dependency rule: this package may import `ubiqa.domain` for entity and value
types only; do not import from `ubiqa.adapters`, `ubiqa.service_layer` or
`ubiqa.entrypoints`.
"""
