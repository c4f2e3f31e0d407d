"""Cloud Controller buildpack endpoints."""
from __future__ import annotations

from .client import CloudControllerClient
from .models import Resource
from .pagination import Page


class BuildpackResource:
    def __init__(self, client: CloudControllerClient):
        self.client = client

    def get_buildpacks(self) -> Page[Resource]:
        return Page.from_json(self.client.get_json("/v2/buildpacks"), Resource.from_json)

    def next_page(self, next_url: str) -> Page[Resource]:
        return Page.from_json(self.client.get_json(next_url), Resource.from_json)
