from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .api.client import ApiClient, ApiConfig
from .api.resources import ResourceGateway
from .cache.storage import InMemoryStorage, KeyValueStorage
from .common.clock import Clock, now_ms
from .core.constants import (
    DEFAULT_API_TIMEOUT_SECONDS,
    DEFAULT_CACHE_TTL_MS,
    DEFAULT_FETCH_MAX_WORKERS,
)
from .core.enums import CacheInvalidation, Resource
from .incidents.service import IncidentService
from .invoices.service import InvoiceService
from .pages.coordinator import FetchCoordinator
from .pages.definitions import PAGES
from .pages.reconciler import ListReconciler
from .pages.service import PageService
from .pages.state import PageSessions


@dataclass(frozen=True)
class Container:
    api: ApiClient
    storage: KeyValueStorage
    sessions: PageSessions

    coordinator: FetchCoordinator
    reconciler: ListReconciler
    gateway: ResourceGateway

    page_services: dict[Resource, PageService]
    invoice_service: InvoiceService
    incident_service: IncidentService


def build_container(
    *,
    api_base_url: str,
    api_timeout_seconds: float = DEFAULT_API_TIMEOUT_SECONDS,
    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS,
    fetch_max_workers: int = DEFAULT_FETCH_MAX_WORKERS,
    cache_invalidation: str = CacheInvalidation.RESOURCE.value,
    api: Optional[ApiClient] = None,
    storage: Optional[KeyValueStorage] = None,
    clock: Clock = now_ms,
) -> Container:
    api = api or ApiClient(ApiConfig(base_url=api_base_url, timeout_seconds=api_timeout_seconds))
    storage = storage or InMemoryStorage()
    sessions = PageSessions(storage, clock=clock, ttl_ms=cache_ttl_ms)

    coordinator = FetchCoordinator(api, max_workers=fetch_max_workers)
    reconciler = ListReconciler(invalidation=CacheInvalidation(cache_invalidation), max_workers=fetch_max_workers)
    gateway = ResourceGateway(api)

    page_services = {
        definition.resource: PageService(definition, sessions, coordinator, reconciler, gateway)
        for definition in PAGES.values()
    }
    invoice_service = InvoiceService(page_services[Resource.INVOICE], api, reconciler)
    incident_service = IncidentService(page_services[Resource.INCIDENT])

    return Container(
        api=api,
        storage=storage,
        sessions=sessions,
        coordinator=coordinator,
        reconciler=reconciler,
        gateway=gateway,
        page_services=page_services,
        invoice_service=invoice_service,
        incident_service=incident_service,
    )
