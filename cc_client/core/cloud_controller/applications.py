"""Cloud Controller application endpoints."""
from __future__ import annotations
from typing import Any, Dict, Optional
from uuid import UUID

from .client import CloudControllerClient
from .models import AppStatus, FilterQuery, Resource
from .pagination import Page


class ApplicationResource:
    """Endpoints under /v2/apps."""

    def __init__(self, client: CloudControllerClient):
        self.client = client

    def get_app_summary(self, app: UUID) -> Dict[str, Any]:
        return self.client.get_json(f"/v2/apps/{app}/summary")

    def restage_app(self, app: UUID) -> None:
        self.client.post(f"/v2/apps/{app}/restage")

    def get_app_bindings(self, app: UUID, query: Optional[FilterQuery] = None) -> Page[Resource]:
        params = query.to_params() if query else None
        return Page.from_json(self.client.get_json(f"/v2/apps/{app}/service_bindings", params=params), Resource.from_json)

    def delete_app(self, app: UUID) -> None:
        self.client.delete(f"/v2/apps/{app}")

    def switch_app(self, app: UUID, status: AppStatus) -> None:
        self.client.put(f"/v2/apps/{app}", json={"state": AppStatus(status).value})

    def get_app_env(self, app: UUID) -> Dict[str, Any]:
        return self.client.get_json(f"/v2/apps/{app}/env")

    def get_applications(self) -> Page[Resource]:
        return Page.from_json(self.client.get_json("/v2/apps"), Resource.from_json)
