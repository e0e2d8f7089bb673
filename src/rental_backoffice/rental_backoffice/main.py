from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .pages.controller import register as register_pages
from .invoices.controller import register as register_invoices
from .incidents.controller import register as register_incidents


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    api_base_url = str(getattr(settings, "API_BASE_URL"))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if app.config["DEBUG"]:
        print("[rental-backoffice] settings=", settings_module, " api=", api_base_url)

    if container is None:
        container = build_container(
            api_base_url=api_base_url,
            api_timeout_seconds=float(getattr(settings, "API_TIMEOUT_SECONDS", 20)),
            cache_ttl_ms=int(getattr(settings, "CACHE_TTL_MS", 300000)),
            fetch_max_workers=int(getattr(settings, "FETCH_MAX_WORKERS", 8)),
            cache_invalidation=str(getattr(settings, "CACHE_INVALIDATION", "resource")),
        )
    app.extensions["rental_backoffice"] = container

    register_invoices(app, container)
    register_incidents(app, container)
    register_pages(app, container)

    return app
