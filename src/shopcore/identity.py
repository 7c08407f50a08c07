"""Identity allocation for stored entities."""

import threading


class IdAllocator:
    """Hands out strictly increasing integer IDs, starting at 1."""

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def peek(self) -> int:
        """Return the ID the next call to next_id() will hand out."""
        with self._lock:
            return self._next
