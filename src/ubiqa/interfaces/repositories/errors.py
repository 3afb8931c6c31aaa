"""Errors related to repository interfaces."""


class RepositoryError(Exception):
    """Base class for all repository-related errors."""

    def __init__(self, kind: str, key: str, message: str | None = None) -> None:
        if message is None:
            message = f"{kind} ({key}) repository error"
        super().__init__(message)
        self.kind = kind
        self.key = key


class NotFoundError(RepositoryError):
    """Raised when an entity cannot be found."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(kind, key, f"{kind.capitalize()} ({key}) not found")


class AccountNotFoundError(NotFoundError):
    """Raised when an account cannot be found."""

    def __init__(self, key: str) -> None:
        super().__init__("account", key)


class PropertyNotFoundError(NotFoundError):
    """Raised when a property cannot be found."""

    def __init__(self, key: str) -> None:
        super().__init__("property", key)


class ListingNotFoundError(NotFoundError):
    """Raised when a listing cannot be found."""

    def __init__(self, key: str) -> None:
        super().__init__("listing", key)


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment cannot be found."""

    def __init__(self, key: str) -> None:
        super().__init__("payment", key)


class DuplicateIdError(RepositoryError):
    """Raised when adding an entity whose id is already stored."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(kind, key, f"{kind.capitalize()} ({key}) already exists")


class StoreUnavailableError(RepositoryError):
    """Raised when the backing store cannot be reached."""

    def __init__(self, kind: str, key: str, reason: str) -> None:
        super().__init__(kind, key, f"{kind.capitalize()} store unavailable: {reason}")
        self.reason = reason


class StaleStatusError(RepositoryError):
    """Raised when a conditional update finds a different stored status."""

    def __init__(self, kind: str, key: str, stored: str, expected: str) -> None:
        super().__init__(
            kind,
            key,
            f"{kind.capitalize()} ({key}) status conflict: "
            f"stored={stored}, expected={expected}",
        )
        self.stored = stored
        self.expected = expected
