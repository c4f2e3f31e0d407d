"""Cloud Controller user endpoints."""
from __future__ import annotations
from typing import List, Optional
from uuid import UUID

from .client import CloudControllerClient
from .models import FilterQuery, Resource
from .pagination import Page


class UserResource:
    """Endpoints under /v2/users."""

    def __init__(self, client: CloudControllerClient):
        """Initialize user resource.

        Args:
            client: Authenticated Cloud Controller client
        """
        self.client = client

    def create_user(self, user: UUID) -> None:
        """Register an existing UAA user with the Cloud Controller."""
        self.client.post("/v2/users", json={"guid": str(user)})

    def delete_user(self, user: UUID) -> None:
        self.client.delete(f"/v2/users/{user}", params={"async": "false"})

    def get_users(self) -> Page[Resource]:
        return Page.from_json(self.client.get_json("/v2/users"), Resource.from_json)

    def next_page(self, next_url: str) -> Page[Resource]:
        return Page.from_json(self.client.get_json(next_url), Resource.from_json)

    def get_users_count(self) -> int:
        """Only the page envelope is needed, so ask for a single result."""
        page = self.client.get_json("/v2/users", params={"results-per-page": 1})
        return int(page.get("total_results") or 0)

    def _orgs(self, user: UUID, relation: str) -> List[Resource]:
        """First page only; continuation links are not followed."""
        page = Page.from_json(self.client.get_json(f"/v2/users/{user}/{relation}"), Resource.from_json)
        return page.resources

    def get_user_organizations(self, user: UUID) -> List[Resource]:
        return self._orgs(user, "organizations")

    def get_managed_organizations(self, user: UUID) -> List[Resource]:
        return self._orgs(user, "managed_organizations")

    def get_audited_organizations(self, user: UUID) -> List[Resource]:
        return self._orgs(user, "audited_organizations")

    def get_billing_managed_organizations(self, user: UUID) -> List[Resource]:
        return self._orgs(user, "billing_managed_organizations")

    def get_user_spaces(self, user: UUID, relation: str, query: Optional[FilterQuery] = None) -> List[Resource]:
        """List spaces related to the user through ``relation`` (``managed_spaces``, ``spaces``, ...)."""
        params = query.to_params() if query else None
        page = Page.from_json(self.client.get_json(f"/v2/users/{user}/{relation}", params=params), Resource.from_json)
        return page.resources
