from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from ..core.constants import DEFAULT_FETCH_MAX_WORKERS, ID_FIELD
from ..core.enums import CacheInvalidation, MutationKind, Resource
from .coordinator import Notification
from .definitions import pages_embedding
from .state import PageState


@dataclass(frozen=True)
class Mutation:
    kind: MutationKind
    record: Optional[dict] = None
    ids: tuple[str, ...] = ()

    @classmethod
    def create(cls, record: dict) -> "Mutation":
        return cls(MutationKind.CREATE, record=record)

    @classmethod
    def update(cls, record: dict) -> "Mutation":
        return cls(MutationKind.UPDATE, record=record)

    @classmethod
    def delete(cls, *ids: str) -> "Mutation":
        return cls(MutationKind.DELETE, ids=tuple(str(i) for i in ids))


@dataclass(frozen=True)
class BulkFailure:
    id: str
    reason: str


@dataclass(frozen=True)
class BulkResult:
    succeeded: tuple[str, ...]
    failed: tuple[BulkFailure, ...]

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    def notification(self, noun: str) -> Notification:
        if not self.failed:
            return Notification("success", f"Đã xóa thành công {len(self.succeeded)} {noun}")
        return Notification("error", f"Có {self.failure_count} {noun} không thể xóa")

    def to_dict(self) -> dict:
        return {
            "succeeded": list(self.succeeded),
            "failed": [{"id": f.id, "reason": f.reason} for f in self.failed],
        }


class ListReconciler:
    """Patches a page's in-memory list with one mutation result.

    The list is patched in place for instant feedback and the cache is always
    invalidated, so the next full load comes from the backend.
    """

    def __init__(
        self,
        *,
        invalidation: CacheInvalidation = CacheInvalidation.RESOURCE,
        max_workers: int = DEFAULT_FETCH_MAX_WORKERS,
        logger: Optional[logging.Logger] = None,
    ):
        self._invalidation = CacheInvalidation(invalidation)
        self._max_workers = max(1, int(max_workers))
        self._log = logger or logging.getLogger("rental_backoffice.pages")

    def apply(self, state: PageState, mutation: Mutation) -> None:
        with state.lock:
            if mutation.kind == MutationKind.CREATE:
                if mutation.record is not None:
                    state.items = [mutation.record, *state.items]
            elif mutation.kind == MutationKind.UPDATE:
                if mutation.record is not None:
                    target = str(mutation.record.get(ID_FIELD))
                    state.items = [mutation.record if str(r.get(ID_FIELD)) == target else r for r in state.items]
            elif mutation.kind == MutationKind.DELETE:
                removed = set(mutation.ids)
                state.items = [r for r in state.items if str(r.get(ID_FIELD)) not in removed]
            state.version += 1
            self.invalidate(state)

    def invalidate(self, state: PageState, *resources: Resource) -> None:
        if self._invalidation == CacheInvalidation.PAGE:
            state.cache.clear()
            return
        keys = {state.cache.key}
        for resource in resources or (state.definition.resource,):
            keys.update(p.key.value for p in pages_embedding(resource))
        state.store.clear_many(sorted(keys))

    def bulk_delete(
        self,
        state: PageState,
        ids: Sequence[str],
        delete_one: Callable[[str], Any],
    ) -> BulkResult:
        """Delete ``ids`` concurrently and apply the successes.

        Each id is an independent call; failures are collected, never retried.
        """

        ids = [str(i) for i in ids]
        if not ids:
            return BulkResult(succeeded=(), failed=())

        outcomes = self._run_all(ids, delete_one)
        succeeded = tuple(i for i, err in outcomes if err is None)
        failed = tuple(BulkFailure(i, err) for i, err in outcomes if err is not None)

        self.apply(state, Mutation.delete(*succeeded))
        return BulkResult(succeeded=succeeded, failed=failed)

    def _run_all(self, ids: list[str], fn: Callable[[str], Any]) -> list[tuple[str, Optional[str]]]:
        def _one(record_id: str) -> Optional[str]:
            try:
                fn(record_id)
                return None
            except Exception as exc:
                self._log.warning("Xóa %s thất bại: %s", record_id, exc)
                return str(exc) or type(exc).__name__

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(ids))) as executor:
            results: Iterable[Optional[str]] = executor.map(_one, ids)
            return list(zip(ids, results))
