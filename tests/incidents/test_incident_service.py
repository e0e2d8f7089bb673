from __future__ import annotations

import pytest

from src.rental_backoffice.rental_backoffice.container import build_container
from src.rental_backoffice.rental_backoffice.core.exceptions import ValidationError


@pytest.fixture
def incidents(fake_api, clock):
    fake_api.on("GET", "/api/su-co", [{"_id": "sc1", "tieuDe": "Mất nước", "trangThai": "moi"}])
    fake_api.on("GET", "/api/phong", [])
    fake_api.on("GET", "/api/khach-thue", [])
    fake_api.on("GET", "/api/hop-dong", [])
    container = build_container(api_base_url="http://backend.test", api=fake_api, clock=clock)
    service = container.incident_service
    service.page.load("s1")
    return service


def test_change_status_puts_new_status(incidents, fake_api):
    fake_api.on("PUT", "/api/su-co/sc1", {"_id": "sc1", "tieuDe": "Mất nước", "trangThai": "dangXuLy"})

    record, note = incidents.change_status("s1", "sc1", "dangXuLy")

    assert fake_api.calls[-1] == ("PUT", "/api/su-co/sc1", None, {"trangThai": "dangXuLy"})
    assert record["trangThai"] == "dangXuLy"
    assert incidents.page.state("s1").items[0]["trangThai"] == "dangXuLy"
    assert note.level == "success"


def test_change_status_without_record_in_reply_merges_locally(incidents, fake_api):
    fake_api.on("PUT", "/api/su-co/sc1", None)
    record, _ = incidents.change_status("s1", "sc1", "daXong")
    assert record == {"_id": "sc1", "tieuDe": "Mất nước", "trangThai": "daXong"}


def test_unknown_status_is_rejected(incidents, fake_api):
    with pytest.raises(ValidationError):
        incidents.change_status("s1", "sc1", "xong")
    assert fake_api.count("PUT", "/api/su-co/sc1") == 0
