from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..common.clock import Clock, now_ms
from ..core.constants import DEFAULT_CACHE_TTL_MS
from ..core.enums import PageKey
from .storage import KeyValueStorage


@dataclass(frozen=True)
class CachedPayload:
    value: Any
    stored_at_ms: int
    ttl_ms: int

    def is_fresh(self, now: int) -> bool:
        return now - self.stored_at_ms < self.ttl_ms

    def to_json(self) -> str:
        return json.dumps(
            {"value": self.value, "storedAtEpochMs": self.stored_at_ms, "ttlMs": self.ttl_ms},
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, raw: str) -> "CachedPayload":
        data = json.loads(raw)
        return cls(
            value=data["value"],
            stored_at_ms=int(data["storedAtEpochMs"]),
            ttl_ms=int(data["ttlMs"]),
        )


class TtlCache:
    """Read-through cache for list pages, one entry per page key.

    Entries expire ``ttl_ms`` after they were written. There is no size bound
    and no other eviction. Storage errors never propagate: a failed read is a
    miss, a failed write is dropped.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Clock = now_ms,
        ttl_ms: int = DEFAULT_CACHE_TTL_MS,
        logger: Optional[logging.Logger] = None,
    ):
        self._storage = storage
        self._clock = clock
        self._ttl_ms = int(ttl_ms)
        self._log = logger or logging.getLogger("rental_backoffice.cache")

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self._storage.get_item(key)
            if raw is None:
                return None
            payload = CachedPayload.from_json(raw)
            if payload.is_fresh(self._clock()):
                return payload.value
            self._storage.remove_item(key)
            return None
        except Exception as exc:
            self._log.warning("Lỗi đọc cache %s: %s", key, exc)
            return None

    def set(self, key: str, value: Any) -> None:
        payload = CachedPayload(value=value, stored_at_ms=self._clock(), ttl_ms=self._ttl_ms)
        try:
            self._storage.set_item(key, payload.to_json())
        except Exception as exc:
            self._log.warning("Lỗi ghi cache %s: %s", key, exc)

    def clear(self, key: str) -> None:
        try:
            self._storage.remove_item(key)
        except Exception as exc:
            self._log.warning("Lỗi xoá cache %s: %s", key, exc)

    def clear_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.clear(key)

    def clear_all(self) -> None:
        self.clear_many(k.value for k in PageKey)


class PageCache:
    """Cache handle bound to a single page key."""

    def __init__(self, cache: TtlCache, key: str):
        self._cache = cache
        self.key = key
        self.is_refreshing = False

    def get(self) -> Optional[Any]:
        return self._cache.get(self.key)

    def set(self, value: Any) -> None:
        self._cache.set(self.key, value)

    def clear(self) -> None:
        self._cache.clear(self.key)
