from __future__ import annotations

import logging
import uuid
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import ApiError, ValidationError

SESSION_KEY = "sid"

_log = logging.getLogger("rental_backoffice.web")


def current_session_id() -> str:
    """Stable id of the browser session; scopes its caches and page state."""
    sid = session.get(SESSION_KEY)
    if not sid:
        sid = uuid.uuid4().hex
        session[SESSION_KEY] = sid
    return str(sid)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def ok(data: Any = None, message: Optional[str] = None, status: int = 200, **extra):
    body = {"success": True, "data": data, "message": message}
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_errors(failure_message: str):
    """Translate errors raised by a JSON view into ``{success: false}`` replies."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return fail(str(e), 400)
            except ApiError as e:
                # A 2xx body with ``success: false`` is still a failed call.
                return fail(str(e), e.status if e.status and e.status >= 400 else 502)
            except HTTPException:
                raise
            except Exception:
                _log.exception("%s %s", request.method, request.path)
                return fail(failure_message, 500)

        return wrapper

    return decorator
