from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..cache.storage import KeyValueStorage, ScopedStorage
from ..cache.ttl_cache import PageCache, TtlCache
from ..common.clock import Clock, now_ms
from ..core.constants import DEFAULT_CACHE_TTL_MS, ID_FIELD
from ..core.enums import PageKey
from .definitions import PAGES, PageDefinition


@dataclass
class PageState:
    """In-memory read model of one list page for one session."""

    definition: PageDefinition
    cache: PageCache
    store: TtlCache
    lists: dict[str, list[dict]] = field(default_factory=dict)
    loading: bool = False
    # Bumped by every applied mutation; a load started before a bump is discarded.
    version: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def loaded(self) -> bool:
        return bool(self.lists)

    @property
    def items(self) -> list[dict]:
        return self.lists.get(self.definition.primary_list, [])

    @items.setter
    def items(self, value: list[dict]) -> None:
        self.lists[self.definition.primary_list] = value

    def ids(self) -> list[str]:
        return [str(r.get(ID_FIELD)) for r in self.items]

    def snapshot(self) -> dict[str, list[dict]]:
        return {name: list(self.lists.get(name, [])) for name in self.definition.list_names}


class PageSessions:
    """Page states and cache scopes per browser session.

    Each session id gets its own cache namespace in the shared storage and its
    own :class:`PageState` per page, kept across requests.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Clock = now_ms,
        ttl_ms: int = DEFAULT_CACHE_TTL_MS,
    ):
        self._storage = storage
        self._clock = clock
        self._ttl_ms = ttl_ms
        self._states: dict[tuple[str, PageKey], PageState] = {}
        self._lock = threading.Lock()

    def cache_for(self, session_id: str) -> TtlCache:
        return TtlCache(ScopedStorage(self._storage, session_id), clock=self._clock, ttl_ms=self._ttl_ms)

    def state(self, session_id: str, key: PageKey) -> PageState:
        with self._lock:
            st = self._states.get((session_id, key))
            if st is None:
                store = self.cache_for(session_id)
                st = PageState(definition=PAGES[key], cache=PageCache(store, key.value), store=store)
                self._states[(session_id, key)] = st
            return st
