from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..core.constants import DEFAULT_API_TIMEOUT_SECONDS
from ..core.exceptions import ApiError

GENERIC_ERROR_MESSAGE = "Có lỗi xảy ra"
UNREACHABLE_MESSAGE = "Không thể kết nối tới máy chủ"


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    timeout_seconds: float = DEFAULT_API_TIMEOUT_SECONDS


@dataclass(frozen=True)
class ApiResponse:
    """Parsed ``{success, data, message}`` envelope."""

    status: int
    success: bool
    data: Any = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300 and self.success


class ApiClient:
    """Thin JSON client for the backend REST API.

    Every call returns the parsed envelope or raises :class:`ApiError`:
    network failures, non-2xx statuses and ``success: false`` bodies are all
    errors for the caller to degrade or report.
    """

    def __init__(
        self,
        config: ApiConfig,
        *,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._base_url = config.base_url.rstrip("/")
        self._timeout = float(config.timeout_seconds)
        self._session = session or requests.Session()
        self._log = logger or logging.getLogger("rental_backoffice.api")

    def get(self, path: str, *, params: Optional[dict] = None) -> ApiResponse:
        return self.request("GET", path, params=params)

    def post(self, path: str, *, json_body: Any = None) -> ApiResponse:
        return self.request("POST", path, json_body=json_body)

    def put(self, path: str, *, json_body: Any = None) -> ApiResponse:
        return self.request("PUT", path, json_body=json_body)

    def delete(self, path: str, *, params: Optional[dict] = None) -> ApiResponse:
        return self.request("DELETE", path, params=params)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json_body: Any = None,
    ) -> ApiResponse:
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            resp = self._session.request(method, url, params=params, json=json_body, timeout=self._timeout)
        except requests.RequestException as exc:
            self._log.warning("%s %s thất bại: %s", method, url, exc)
            raise ApiError(UNREACHABLE_MESSAGE) from exc

        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        ok_status = 200 <= resp.status_code < 300
        parsed = ApiResponse(
            status=resp.status_code,
            # Some endpoints omit ``success`` on 2xx; treat a 2xx body without it as success.
            success=bool(body.get("success", ok_status)),
            data=body.get("data"),
            message=body.get("message") or body.get("error"),
        )
        if not parsed.ok:
            raise ApiError(parsed.message or GENERIC_ERROR_MESSAGE, status=resp.status_code)
        return parsed
