from __future__ import annotations

import copy
import threading

import pytest

from src.rental_backoffice.rental_backoffice.api.client import ApiResponse
from src.rental_backoffice.rental_backoffice.core.exceptions import ApiError

START_MS = 1_760_000_000_000


class FakeClock:
    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeApi:
    """Stands in for ApiClient; answers from a table of (method, path) routes."""

    def __init__(self):
        self.routes: dict = {}
        self.calls: list = []
        self._lock = threading.Lock()

    def on(self, method, path, data=None, *, message=None, error=None, handler=None):
        self.routes[(method, path)] = (data, message, error, handler)

    def count(self, method, path):
        return sum(1 for m, p, _, _ in self.calls if m == method and p == path)

    def request(self, method, path, *, params=None, json_body=None):
        with self._lock:
            self.calls.append((method, path, params, json_body))
        route = self.routes.get((method, path))
        if route is None:
            raise ApiError("Not found", status=404)
        data, message, error, handler = route
        if handler is not None:
            return handler(params, json_body)
        if error is not None:
            raise error
        return ApiResponse(status=200, success=True, data=copy.deepcopy(data), message=message)

    def get(self, path, *, params=None):
        return self.request("GET", path, params=params)

    def post(self, path, *, json_body=None):
        return self.request("POST", path, json_body=json_body)

    def put(self, path, *, json_body=None):
        return self.request("PUT", path, json_body=json_body)

    def delete(self, path, *, params=None):
        return self.request("DELETE", path, params=params)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_api():
    return FakeApi()
