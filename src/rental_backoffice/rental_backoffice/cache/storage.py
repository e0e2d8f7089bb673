from __future__ import annotations

import threading
from typing import Optional, Protocol, Sequence


class KeyValueStorage(Protocol):
    """String key/value storage the page cache is written to."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> Sequence[str]:
        raise NotImplementedError


class InMemoryStorage:
    """Process-local storage shared by every session of the app."""

    def __init__(self):
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> Sequence[str]:
        with self._lock:
            return list(self._items)


class ScopedStorage:
    """View of a storage restricted to one session scope.

    Keys are stored as ``<scope>:<key>``; ``keys()`` only returns the keys of
    this scope, without the prefix.
    """

    def __init__(self, inner: KeyValueStorage, scope: str):
        self._inner = inner
        self._prefix = f"{scope}:"

    def _k(self, key: str) -> str:
        return self._prefix + key

    def get_item(self, key: str) -> Optional[str]:
        return self._inner.get_item(self._k(key))

    def set_item(self, key: str, value: str) -> None:
        self._inner.set_item(self._k(key), value)

    def remove_item(self, key: str) -> None:
        self._inner.remove_item(self._k(key))

    def keys(self) -> Sequence[str]:
        n = len(self._prefix)
        return [k[n:] for k in self._inner.keys() if k.startswith(self._prefix)]
