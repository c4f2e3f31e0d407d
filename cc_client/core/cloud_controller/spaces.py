"""Cloud Controller space endpoints."""
from __future__ import annotations
from typing import Any, Dict
from uuid import UUID

from .client import CloudControllerClient
from .models import OrgUser, Resource
from .pagination import Page
from .roles import Role


class SpaceResource:
    """Endpoints under /v2/spaces."""

    def __init__(self, client: CloudControllerClient):
        """Initialize space resource.

        Args:
            client: Authenticated Cloud Controller client
        """
        self.client = client

    def create_space(self, org: UUID, name: str) -> Resource:
        resp = self.client.post("/v2/spaces", json={"organization_guid": str(org), "name": name})
        return Resource.from_json(resp.json())

    def remove_space(self, space: UUID) -> None:
        self.client.delete(f"/v2/spaces/{space}", params={"async": "true", "recursive": "true"})

    def get_space(self, space: UUID) -> Resource:
        return Resource.from_json(self.client.get_json(f"/v2/spaces/{space}"))

    def get_spaces(self) -> Page[Resource]:
        return Page.from_json(self.client.get_json("/v2/spaces"), Resource.from_json)

    def next_page(self, next_url: str) -> Page[Resource]:
        return Page.from_json(self.client.get_json(next_url), Resource.from_json)

    def get_space_summary(self, space: UUID) -> Dict[str, Any]:
        return self.client.get_json(f"/v2/spaces/{space}/summary")

    def get_services(self, space: UUID) -> Page[Resource]:
        return Page.from_json(self.client.get_json(f"/v2/spaces/{space}/services"), Resource.from_json)

    def get_space_users(self, space: UUID, role: Role) -> Page[OrgUser]:
        return Page.from_json(self.client.get_json(f"/v2/spaces/{space}/{role.value}"), OrgUser.from_json)

    def get_space_users_with_roles(self, space: UUID) -> Page[OrgUser]:
        return Page.from_json(self.client.get_json(f"/v2/spaces/{space}/user_roles"), OrgUser.from_json)

    def next_users_page(self, next_url: str) -> Page[OrgUser]:
        return Page.from_json(self.client.get_json(next_url), OrgUser.from_json)

    def associate_developer_with_space(self, space: UUID, user: UUID) -> None:
        self.client.put(f"/v2/spaces/{space}/developers/{user}")

    def associate_manager_with_space(self, space: UUID, user: UUID) -> None:
        self.client.put(f"/v2/spaces/{space}/managers/{user}")

    def associate_user_with_space_role(self, space: UUID, user: UUID, role: Role) -> None:
        self.client.put(f"/v2/spaces/{space}/{role.value}/{user}")

    def remove_space_role_from_user(self, space: UUID, user: UUID, role: Role) -> None:
        self.client.delete(f"/v2/spaces/{space}/{role.value}/{user}")
