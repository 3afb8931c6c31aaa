"""Interface for the account repository."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ubiqa.domain.entities.account import Account
    from ubiqa.domain.entities.ids import AccountId


class AccountRepository(abc.ABC):
    """Contract for storing and loading accounts."""

    @abc.abstractmethod
    def add(self, account: Account) -> None:
        """Store a new account.

        Raises:
            DuplicateIdError: If the id is already stored.
        """

    @abc.abstractmethod
    def update(self, account: Account) -> None:
        """Replace a stored account.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """

    @abc.abstractmethod
    def get(self, account_id: AccountId) -> Account:
        """Load an account.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """

    @abc.abstractmethod
    def find_by_email(self, email: str) -> Account | None:
        """Return the account registered with `email` (case-insensitive)."""
