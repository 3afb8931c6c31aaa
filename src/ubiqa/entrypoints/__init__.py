"""Entrypoints (inbound adapters) for UBIQA.

Expose the application to the outside world: CLI commands today, HTTP routes
and job runners later. Parse and validate inputs, call service-layer handlers
through the bootstrapped message bus, and present results.

Dependency rule: may import `ubiqa.bootstrap` and `ubiqa.service_layer`;
avoid importing `ubiqa.adapters` directly.
"""
