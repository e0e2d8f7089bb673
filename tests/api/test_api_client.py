from __future__ import annotations

import pytest
import requests

from src.rental_backoffice.rental_backoffice.api.client import ApiClient, ApiConfig, UNREACHABLE_MESSAGE
from src.rental_backoffice.rental_backoffice.api.resources import ResourceGateway
from src.rental_backoffice.rental_backoffice.core.enums import Resource
from src.rental_backoffice.rental_backoffice.core.exceptions import ApiError


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, *, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _client(session, timeout=20.0):
    return ApiClient(ApiConfig(base_url="http://backend.test/", timeout_seconds=timeout), session=session)


def test_success_envelope_is_parsed():
    session = FakeSession(FakeResponse(200, {"success": True, "data": [{"_id": "1"}], "message": "ok"}))
    resp = _client(session, timeout=7).get("/api/phong", params={"limit": 100})

    assert resp.data == [{"_id": "1"}]
    assert resp.message == "ok"
    assert session.calls[0]["url"] == "http://backend.test/api/phong"
    assert session.calls[0]["params"] == {"limit": 100}
    assert session.calls[0]["timeout"] == 7.0


def test_missing_success_flag_on_2xx_is_success():
    resp = _client(FakeSession(FakeResponse(201, {"data": {"_id": "9"}}))).post("/api/phong", json_body={"a": 1})
    assert resp.ok
    assert resp.data == {"_id": "9"}


def test_error_status_uses_backend_message():
    session = FakeSession(FakeResponse(400, {"success": False, "message": "Mã phòng đã tồn tại"}))
    with pytest.raises(ApiError) as exc:
        _client(session).post("/api/phong", json_body={})
    assert str(exc.value) == "Mã phòng đã tồn tại"
    assert exc.value.status == 400


def test_error_field_is_used_when_message_missing():
    session = FakeSession(FakeResponse(401, {"error": "Unauthorized"}))
    with pytest.raises(ApiError, match="Unauthorized"):
        _client(session).get("/api/phong")


def test_success_false_on_2xx_is_an_error():
    session = FakeSession(FakeResponse(200, {"success": False}))
    with pytest.raises(ApiError, match="Có lỗi xảy ra"):
        _client(session).get("/api/phong")


def test_non_json_body_on_error():
    session = FakeSession(FakeResponse(500, ValueError("no json")))
    with pytest.raises(ApiError) as exc:
        _client(session).get("/api/phong")
    assert exc.value.status == 500


def test_network_failure_becomes_api_error():
    session = FakeSession(error=requests.ConnectionError("refused"))
    with pytest.raises(ApiError) as exc:
        _client(session).get("/api/phong")
    assert str(exc.value) == UNREACHABLE_MESSAGE
    assert exc.value.status is None


def test_gateway_item_urls_per_resource():
    session = FakeSession(FakeResponse(200, {"success": True}))
    gateway = ResourceGateway(_client(session))

    gateway.delete(Resource.INVOICE, "42")
    gateway.delete(Resource.ROOM, "p1")
    gateway.update(Resource.TENANT, "k1", {"hoTen": "A"})

    assert session.calls[0]["url"] == "http://backend.test/api/hoa-don"
    assert session.calls[0]["params"] == {"id": "42"}
    assert session.calls[1]["url"] == "http://backend.test/api/phong/p1"
    assert session.calls[1]["params"] is None
    assert session.calls[2]["method"] == "PUT"
    assert session.calls[2]["url"] == "http://backend.test/api/khach-thue/k1"
