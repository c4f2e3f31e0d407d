"""Cloud Controller service binding endpoints."""
from __future__ import annotations
from uuid import UUID

from .client import CloudControllerClient
from .models import FilterQuery, NewServiceBinding, Resource
from .pagination import Page


class ServiceBindingResource:
    """Endpoints under /v2/service_bindings."""

    def __init__(self, client: CloudControllerClient):
        self.client = client

    def create_service_binding(self, binding: NewServiceBinding) -> Resource:
        resp = self.client.post("/v2/service_bindings", json=binding.to_json())
        return Resource.from_json(resp.json())

    def delete_service_binding(self, binding: UUID) -> None:
        self.client.delete(f"/v2/service_bindings/{binding}")

    def get_service_bindings(self, query: FilterQuery) -> Page[Resource]:
        return Page.from_json(
            self.client.get_json("/v2/service_bindings", params=query.to_params()),
            Resource.from_json,
        )
