from __future__ import annotations

from ..core.enums import IncidentStatus
from ..core.exceptions import ValidationError
from ..pages.coordinator import Notification
from ..pages.service import PageService


class IncidentService:
    def __init__(self, page: PageService):
        self.page = page

    def change_status(self, session_id: str, incident_id: str, status: str) -> tuple[dict, Notification]:
        try:
            IncidentStatus(status)
        except ValueError:
            raise ValidationError("Trạng thái sự cố không hợp lệ")
        record, _ = self.page.update(session_id, incident_id, {"trangThai": status})
        return record, Notification("success", "Cập nhật trạng thái thành công")
