from __future__ import annotations

from typing import Optional, Sequence

from ..api.resources import ResourceGateway
from ..core.constants import ID_FIELD
from ..core.exceptions import ApiError
from .coordinator import FetchCoordinator, LoadResult, Notification
from .definitions import PageDefinition
from .reconciler import BulkResult, ListReconciler, Mutation
from .state import PageSessions, PageState


class PageService:
    """List page workflow: load through the cache, mutate through the backend,
    reconcile the result into the session's page state."""

    def __init__(
        self,
        definition: PageDefinition,
        sessions: PageSessions,
        coordinator: FetchCoordinator,
        reconciler: ListReconciler,
        gateway: ResourceGateway,
    ):
        self.definition = definition
        self._sessions = sessions
        self._coordinator = coordinator
        self._reconciler = reconciler
        self._gateway = gateway

    def state(self, session_id: str) -> PageState:
        return self._sessions.state(session_id, self.definition.key)

    def load(self, session_id: str, *, force_refresh: bool = False) -> tuple[PageState, LoadResult]:
        st = self.state(session_id)
        result = self._coordinator.load(st, force_refresh=force_refresh)
        return st, result

    def find(self, session_id: str, record_id: str, list_name: Optional[str] = None) -> Optional[dict]:
        """Row of one of the page's lists; the page is loaded first when this
        session has not loaded it yet."""

        st = self.state(session_id)
        if not st.loaded:
            self._coordinator.load(st)
        rows = st.lists.get(list_name or self.definition.primary_list, [])
        return next((r for r in rows if str(r.get(ID_FIELD)) == str(record_id)), None)

    def refresh(self, session_id: str) -> Notification:
        return self._coordinator.handle_refresh(self.state(session_id))

    def create(self, session_id: str, payload: dict) -> tuple[dict, Notification]:
        resp = self._gateway.create(self.definition.resource, payload)
        record = resp.data if isinstance(resp.data, dict) else None
        if record is None:
            raise ApiError("Máy chủ không trả về dữ liệu đã tạo", status=502)
        self._reconciler.apply(self.state(session_id), Mutation.create(record))
        return record, Notification("success", resp.message or f"Tạo {self.definition.noun} thành công")

    def update(self, session_id: str, record_id: str, payload: dict) -> tuple[dict, Notification]:
        st = self.state(session_id)
        resp = self._gateway.update(self.definition.resource, str(record_id), payload)
        record = resp.data if isinstance(resp.data, dict) else self._merged(st, str(record_id), payload)
        self._reconciler.apply(st, Mutation.update(record))
        return record, Notification("success", resp.message or f"Cập nhật {self.definition.noun} thành công")

    def delete(self, session_id: str, record_id: str) -> Notification:
        resp = self._gateway.delete(self.definition.resource, str(record_id))
        self._reconciler.apply(self.state(session_id), Mutation.delete(str(record_id)))
        return Notification("success", resp.message or f"Đã xóa {self.definition.noun} thành công")

    def bulk_delete(self, session_id: str, ids: Sequence[str]) -> BulkResult:
        return self._reconciler.bulk_delete(
            self.state(session_id),
            ids,
            lambda record_id: self._gateway.delete(self.definition.resource, record_id),
        )

    @staticmethod
    def _merged(st: PageState, record_id: str, payload: dict) -> dict:
        current: Optional[dict] = next((r for r in st.items if str(r.get(ID_FIELD)) == record_id), None)
        return {**(current or {}), **payload, ID_FIELD: record_id}
