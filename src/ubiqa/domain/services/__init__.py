"""Per-entity domain services.

Stateless module-level functions grouped by entity: validated factories and
lifecycle helpers. Configuration is passed in as a `PricingConfig` argument.
"""

from . import account_service, listing_service, payment_service, property_service

__all__ = ["account_service", "listing_service", "payment_service", "property_service"]
