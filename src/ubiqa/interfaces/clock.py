"""Interface for clocks.

Domain operations accept an explicit `now`; the service layer obtains it from
a `Clock` so handlers stay deterministic under test.
"""

import abc
from datetime import datetime

# pylint: disable=too-few-public-methods


class Clock(abc.ABC):
    """Contract for a source of the current time."""

    @abc.abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
