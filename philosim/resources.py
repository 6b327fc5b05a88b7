"""A mutex-protected resource with an availability flag."""

from __future__ import annotations

import threading


class SharedResource:
    """A lock guarding shared data, plus a guarded availability flag used by try_lock."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._stuff = threading.Lock()
        self._available = True

    @property
    def available(self) -> bool:
        with self._guard:
            return self._available

    def lock(self) -> None:
        """Block until the resource is held."""
        self._stuff.acquire()

    def unlock(self) -> None:
        """Release the resource and mark it available again."""
        with self._guard:
            self._stuff.release()
            self._available = True

    def try_lock(self) -> bool:
        """Take the resource if it is marked available; return whether it was taken."""
        with self._guard:
            if not self._available:
                return False
            self._stuff.acquire()
            self._available = False
            return True

    def __enter__(self) -> "SharedResource":
        self.lock()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unlock()