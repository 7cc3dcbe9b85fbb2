"""A time-limited cache in front of a secret backend."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from vaulty.backend.base import SecretBackend


class CachedBackend(SecretBackend):
    """Wraps a backend and keeps fetched values for ``ttl`` seconds."""

    def __init__(
        self,
        inner: SecretBackend,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.inner = inner
        self.ttl = ttl
        self._clock = clock
        self._cache: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self.inner.name

    def list(self) -> list[str]:
        """Delegate to the wrapped backend; listings are not cached."""
        return self.inner.list()

    def get(self, name: str) -> str:
        """Return a cached value while fresh, otherwise fetch and cache it."""
        with self._lock:
            entry = self._cache.get(name)
        if entry is not None:
            value, fetched_at = entry
            if self._clock() - fetched_at < self.ttl:
                return value

        value = self.inner.get(name)
        with self._lock:
            self._cache[name] = (value, self._clock())
        return value

    def zero(self) -> None:
        """Drop every cached value."""
        with self._lock:
            self._cache.clear()