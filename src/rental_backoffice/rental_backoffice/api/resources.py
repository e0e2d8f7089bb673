from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Resource
from .client import ApiClient, ApiResponse


@dataclass(frozen=True)
class ResourceEndpoint:
    """REST paths of one backend resource.

    Invoices (``hoa-don``) take the id as a query parameter for item calls;
    every other resource takes it as a path segment.
    """

    resource: Resource
    path: str
    id_in_query: bool = False

    def item_call(self, record_id: str) -> tuple[str, Optional[dict]]:
        if self.id_in_query:
            return self.path, {"id": record_id}
        return f"{self.path}/{record_id}", None


ENDPOINTS: dict[Resource, ResourceEndpoint] = {
    Resource.INVOICE: ResourceEndpoint(Resource.INVOICE, "/api/hoa-don", id_in_query=True),
    Resource.CONTRACT: ResourceEndpoint(Resource.CONTRACT, "/api/hop-dong"),
    Resource.ROOM: ResourceEndpoint(Resource.ROOM, "/api/phong"),
    Resource.TENANT: ResourceEndpoint(Resource.TENANT, "/api/khach-thue"),
    Resource.BUILDING: ResourceEndpoint(Resource.BUILDING, "/api/toa-nha"),
    Resource.PAYMENT: ResourceEndpoint(Resource.PAYMENT, "/api/thanh-toan"),
    Resource.INCIDENT: ResourceEndpoint(Resource.INCIDENT, "/api/su-co"),
}


class ResourceGateway:
    """Create/update/delete calls for any resource in :data:`ENDPOINTS`."""

    def __init__(self, api: ApiClient):
        self._api = api

    def create(self, resource: Resource, payload: dict) -> ApiResponse:
        return self._api.post(ENDPOINTS[resource].path, json_body=payload)

    def update(self, resource: Resource, record_id: str, payload: dict) -> ApiResponse:
        endpoint = ENDPOINTS[resource]
        if endpoint.id_in_query:
            # The invoice endpoint reads the id from the body on PUT.
            return self._api.put(endpoint.path, json_body={**payload, "id": record_id})
        path, _ = endpoint.item_call(record_id)
        return self._api.put(path, json_body=payload)

    def delete(self, resource: Resource, record_id: str) -> ApiResponse:
        path, params = ENDPOINTS[resource].item_call(record_id)
        return self._api.delete(path, params=params)
