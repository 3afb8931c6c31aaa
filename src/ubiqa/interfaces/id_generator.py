"""Port for minting entity identifiers."""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Source of identifiers for new properties, listings and payments.

    Handlers wrap the returned string in the matching typed ID. Values must
    be unique and non-empty; lexical order is only guaranteed by generators
    that document it.
    """

    @abc.abstractmethod
    def new_id(self) -> str:
        """Return a fresh identifier."""
