"""Cloud Controller service catalog, instance, plan and key endpoints."""
from __future__ import annotations
from typing import Dict, Optional
from uuid import UUID

from .client import CloudControllerClient
from .models import FilterQuery, NewServiceInstance, NewServiceKey, Resource
from .pagination import Page


def _listing_params(query: Optional[FilterQuery] = None, depth: Optional[int] = None) -> Optional[Dict]:
    params: Dict = {}
    if query is not None:
        params.update(query.to_params())
    if depth is not None:
        params["inline-relations-depth"] = depth
    return params or None


class ServiceResource:
    """Endpoints under /v2/services, /v2/service_instances, /v2/service_plans,
    /v2/service_keys and /v2/service_plan_visibilities."""

    def __init__(self, client: CloudControllerClient):
        """Initialize service resource.

        Args:
            client: Authenticated Cloud Controller client
        """
        self.client = client

    def _page(self, path: str, params: Optional[Dict] = None) -> Page[Resource]:
        return Page.from_json(self.client.get_json(path, params=params), Resource.from_json)

    def next_page(self, next_url: str) -> Page[Resource]:
        return self._page(next_url)

    def get_services(self, query: Optional[FilterQuery] = None) -> Page[Resource]:
        return self._page("/v2/services", _listing_params(query))

    def get_service(self, service: UUID) -> Resource:
        return Resource.from_json(self.client.get_json(f"/v2/services/{service}"))

    def get_extended_service_instances(
        self, query: Optional[FilterQuery] = None, depth: Optional[int] = None
    ) -> Page[Resource]:
        """List service instances; ``depth`` inlines related records (plan, space, ...)."""
        return self._page("/v2/service_instances", _listing_params(query, depth))

    def get_extended_service_plans(self, service: UUID) -> Page[Resource]:
        return self._page(f"/v2/services/{service}/service_plans")

    def create_service_instance(self, instance: NewServiceInstance) -> Resource:
        resp = self.client.post(
            "/v2/service_instances",
            json=instance.to_json(),
            params={"accepts_incomplete": "false"},
        )
        return Resource.from_json(resp.json())

    def delete_service_instance(self, instance: UUID) -> None:
        self.client.delete(f"/v2/service_instances/{instance}")

    def get_service_keys(self) -> Page[Resource]:
        return self._page("/v2/service_keys")

    def create_service_key(self, key: NewServiceKey) -> Resource:
        resp = self.client.post("/v2/service_keys", json=key.to_json())
        return Resource.from_json(resp.json())

    def delete_service_key(self, key: UUID) -> None:
        self.client.delete(f"/v2/service_keys/{key}")

    def set_service_plan_visibility(self, service_plan: UUID, org: UUID) -> Resource:
        resp = self.client.post(
            "/v2/service_plan_visibilities",
            json={"service_plan_guid": str(service_plan), "organization_guid": str(org)},
        )
        return Resource.from_json(resp.json())

    def get_service_plan_visibility(self, query: Optional[FilterQuery] = None) -> Page[Resource]:
        return self._page("/v2/service_plan_visibilities", _listing_params(query))
