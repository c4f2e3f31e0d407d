"""Cloud Controller organization endpoints."""
from __future__ import annotations
from typing import Any, Dict
from uuid import UUID

from .client import CloudControllerClient
from .models import OrgUser, Resource
from .pagination import Page
from .roles import Role


class OrganizationResource:
    """Endpoints under /v2/organizations."""

    def __init__(self, client: CloudControllerClient):
        """Initialize organization resource.

        Args:
            client: Authenticated Cloud Controller client
        """
        self.client = client

    def create_organization(self, name: str) -> Resource:
        resp = self.client.post("/v2/organizations", json={"name": name})
        return Resource.from_json(resp.json())

    def update_organization(self, org: UUID, name: str) -> None:
        self.client.put(f"/v2/organizations/{org}", json={"name": name})

    def delete_organization(self, org: UUID) -> None:
        """Delete the org and everything in it; the platform finishes the work asynchronously."""
        self.client.delete(f"/v2/organizations/{org}", params={"async": "true", "recursive": "true"})

    def get_organization(self, org: UUID) -> Resource:
        return Resource.from_json(self.client.get_json(f"/v2/organizations/{org}"))

    def get_orgs(self) -> Page[Resource]:
        return Page.from_json(self.client.get_json("/v2/organizations"), Resource.from_json)

    def next_page(self, next_url: str) -> Page[Resource]:
        return Page.from_json(self.client.get_json(next_url), Resource.from_json)

    def get_organization_users(self, org: UUID, role: Role) -> Page[OrgUser]:
        """List org members holding ``role`` (path segment ``managers``, ``auditors``, ...)."""
        return Page.from_json(self.client.get_json(f"/v2/organizations/{org}/{role.value}"), OrgUser.from_json)

    def get_organization_users_with_roles(self, org: UUID) -> Page[OrgUser]:
        return Page.from_json(self.client.get_json(f"/v2/organizations/{org}/user_roles"), OrgUser.from_json)

    def next_users_page(self, next_url: str) -> Page[OrgUser]:
        return Page.from_json(self.client.get_json(next_url), OrgUser.from_json)

    def associate_user_with_organization(self, org: UUID, user: UUID) -> None:
        self.client.put(f"/v2/organizations/{org}/users/{user}")

    def associate_manager_with_organization(self, org: UUID, manager: UUID) -> None:
        self.client.put(f"/v2/organizations/{org}/managers/{manager}")

    def associate_user_with_organization_role(self, org: UUID, user: UUID, role: Role) -> None:
        self.client.put(f"/v2/organizations/{org}/{role.value}/{user}")

    def remove_organization_role_from_user(self, org: UUID, user: UUID, role: Role) -> None:
        self.client.delete(f"/v2/organizations/{org}/{role.value}/{user}")

    def get_spaces_for_organization(self, org: UUID) -> Page[Resource]:
        return Page.from_json(
            self.client.get_json(f"/v2/organizations/{org}/spaces", params={"inline-relations-depth": 1}),
            Resource.from_json,
        )

    def get_memory_usage(self, org: UUID) -> Dict[str, Any]:
        return self.client.get_json(f"/v2/organizations/{org}/memory_usage")

    def get_organization_summary(self, org: UUID) -> Dict[str, Any]:
        return self.client.get_json(f"/v2/organizations/{org}/summary")

    def get_organization_services(self, org: UUID) -> Page[Resource]:
        return Page.from_json(self.client.get_json(f"/v2/organizations/{org}/services"), Resource.from_json)
