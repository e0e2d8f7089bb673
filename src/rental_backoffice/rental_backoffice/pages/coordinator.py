from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional

from ..api.client import ApiClient
from ..core.constants import DEFAULT_FETCH_MAX_WORKERS, REFRESH_SUCCESS_MESSAGE
from ..core.exceptions import ApiError
from .definitions import FetchSource
from .state import PageState


@dataclass(frozen=True)
class SourceFailure:
    path: str
    reason: str


@dataclass(frozen=True)
class LoadResult:
    from_cache: bool
    failures: tuple[SourceFailure, ...] = ()
    superseded: bool = False


@dataclass(frozen=True)
class Notification:
    """Toast-style message returned to the UI."""

    level: str
    message: str

    def to_dict(self) -> dict:
        return {"level": self.level, "message": self.message}


class FetchCoordinator:
    """Loads a page: cache first, otherwise one concurrent GET per source.

    A failed source only empties its own lists; the page always loads.
    """

    def __init__(
        self,
        api: ApiClient,
        *,
        max_workers: int = DEFAULT_FETCH_MAX_WORKERS,
        logger: Optional[logging.Logger] = None,
    ):
        self._api = api
        self._max_workers = max(1, int(max_workers))
        self._log = logger or logging.getLogger("rental_backoffice.pages")

    def load(self, state: PageState, force_refresh: bool = False) -> LoadResult:
        state.loading = True
        try:
            with state.lock:
                if not force_refresh:
                    cached = state.cache.get()
                    if isinstance(cached, dict):
                        state.lists = {name: list(cached.get(name) or []) for name in state.definition.list_names}
                        return LoadResult(from_cache=True)
                started = state.version

            lists, failures = self._fetch_sources(state.definition.sources)
            with state.lock:
                if state.version != started:
                    # A mutation was applied while fetching; the patched list
                    # and its cleared cache win over this older read.
                    self._log.info("Bỏ qua kết quả tải %s vì dữ liệu đã thay đổi", state.definition.key.value)
                    for name in state.definition.list_names:
                        state.lists.setdefault(name, lists.get(name, []))
                    return LoadResult(from_cache=False, failures=tuple(failures), superseded=True)
                state.lists = {name: lists.get(name, []) for name in state.definition.list_names}
                # Empty and degraded results are cached too, so a failing backend
                # is not hit again on every navigation.
                state.cache.set(state.snapshot())
            return LoadResult(from_cache=False, failures=tuple(failures))
        finally:
            state.loading = False

    def handle_refresh(self, state: PageState) -> Notification:
        state.cache.is_refreshing = True
        try:
            self.load(state, force_refresh=True)
        finally:
            state.cache.is_refreshing = False
        return Notification("success", REFRESH_SUCCESS_MESSAGE)

    def _fetch_sources(self, sources: tuple[FetchSource, ...]) -> tuple[dict[str, list], list[SourceFailure]]:
        lists: dict[str, list] = {}
        failures: list[SourceFailure] = []
        workers = min(self._max_workers, len(sources)) or 1

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [(source, executor.submit(self._fetch_one, source)) for source in sources]
            for source, future in futures:
                try:
                    lists.update(future.result())
                except Exception as exc:
                    reason = str(exc) if isinstance(exc, ApiError) else f"{type(exc).__name__}: {exc}"
                    self._log.warning("Không tải được %s: %s", source.path, reason)
                    failures.append(SourceFailure(source.path, reason))
                    for name in source.lists:
                        lists[name] = []
        return lists, failures

    def _fetch_one(self, source: FetchSource) -> dict[str, list]:
        data = self._api.get(source.path, params=source.params).data
        out: dict[str, list] = {}
        for name, field_name in source.lists.items():
            value: Any = data if field_name is None else (data.get(field_name) if isinstance(data, dict) else None)
            if value is None:
                value = []
            if not isinstance(value, list):
                self._log.warning("Dữ liệu %s từ %s không phải danh sách", name, source.path)
                value = []
            out[name] = value
        return out
