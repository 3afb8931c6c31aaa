"""ID generators for UBIQA entities."""

import threading
import uuid

from ulid import monotonic

from ubiqa.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator.

    ULIDs sort by creation time, so listings and payments keyed by them list
    in creation order without an extra column. Generated with `ulid-py`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate a new ULID (serialized across threads)."""
        with self._lock:
            return str(monotonic.new())


class UUIDv4Generator(IdGenerator):
    """Random UUIDv4 identifiers, for ids that must not reveal creation order."""

    def new_id(self) -> str:
        """Generate a new UUID."""
        return str(uuid.uuid4())


class SequentialIdGenerator(IdGenerator):
    """Readable sequential ids such as ``listing-0001``.

    Note:
        Not suitable for production use; primarily for tests and demos.
    """

    def __init__(self, prefix: str = "id", width: int = 4) -> None:
        self._counter = 0
        self._prefix = prefix
        self._width = width
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate the next identifier in the sequence."""
        with self._lock:
            self._counter += 1
            return f"{self._prefix}-{self._counter:0{self._width}d}"
