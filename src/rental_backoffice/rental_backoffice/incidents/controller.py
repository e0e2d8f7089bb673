from __future__ import annotations

from flask import Flask

from ..common.web import current_session_id, json_body, json_errors, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard/su-co/<incident_id>/trang-thai", methods=["PUT"], endpoint="incident_status")
    @json_errors("Có lỗi xảy ra khi cập nhật trạng thái")
    def incident_status(incident_id: str):
        status = str(json_body().get("trangThai") or "")
        record, note = container.incident_service.change_status(current_session_id(), incident_id, status)
        return ok(record, note.message)
