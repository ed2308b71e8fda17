"""Session-lifetime caches keyed by championship id."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, TypeVar

T = TypeVar("T")


class KeyedCache(ABC, Generic[T]):
    """Get-or-populate by key. Entries are never evicted or refreshed."""

    @abstractmethod
    def get_or_populate(self, key: str, factory: Callable[[], T]) -> T:
        ...


class InMemoryCache(KeyedCache[T]):
    def __init__(self) -> None:
        self._entries: Dict[str, T] = {}
        self._lock = threading.Lock()

    def get_or_populate(self, key: str, factory: Callable[[], T]) -> T:
        with self._lock:
            if key in self._entries:
                return self._entries[key]
        # Populate outside the lock; a failed factory leaves no entry behind.
        value = factory()
        with self._lock:
            return self._entries.setdefault(key, value)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
