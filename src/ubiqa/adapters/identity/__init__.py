"""Identity provider adapters."""

from .memory import InMemoryIdentityProvider

__all__ = ["InMemoryIdentityProvider"]
