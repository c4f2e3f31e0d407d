"""Pytest shared fixtures for the Cloud Controller client tests."""
import pathlib
import sys
import uuid
from typing import Any, Callable, Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from cc_client.core.cloud_controller.exceptions import CloudControllerAPIError


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from reaching a real Cloud Controller or UAA.

    Tests that exercise the transport replace these stubs with their own.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _refuse(method):
        def _stub(url, *args, **kwargs):
            raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")
        return _stub

    for method in ("get", "post", "put", "delete"):
        monkeypatch.setattr(requests, method, _refuse(method.upper()))


# ─────────────────────────────────────────────────────────────────────────────
# Stub responses and a fake transport
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, text: Optional[str] = None, url: str = ""):
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else ("" if payload is None else str(payload))
        self.url = url

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


def make_resource(guid: Optional[str] = None, name: Optional[str] = None, **entity) -> dict:
    guid = guid or str(uuid.uuid4())
    if name is not None:
        entity["name"] = name
    return {"metadata": {"guid": guid, "url": f"/v2/things/{guid}"}, "entity": entity}


def make_page(resources: list, next_url: Optional[str] = None, total_results: Optional[int] = None) -> dict:
    return {
        "total_results": len(resources) if total_results is None else total_results,
        "total_pages": 1,
        "prev_url": None,
        "next_url": next_url,
        "resources": resources,
    }


class FakeCloudController:
    """Stands in for CloudControllerClient: serves canned JSON per (method, path) and records calls.

    A route value may be a payload, an exception instance to raise, or a
    callable taking the call's kwargs.
    """

    def __init__(self):
        self.routes: dict = {}
        self.calls: list = []
        self.base_url = "http://cc.test"

    def route(self, method: str, path: str, payload: Any = None) -> None:
        self.routes[(method, path)] = payload

    def fail(self, method: str, path: str, status_code: int = 500, body: Any = None) -> None:
        self.routes[(method, path)] = CloudControllerAPIError(status_code, body or {"description": "boom"}, path)

    def calls_to(self, method: Optional[str] = None) -> list:
        return [call for call in self.calls if method is None or call[0] == method]

    def _serve(self, method: str, path: str, **kwargs) -> StubResponse:
        self.calls.append((method, path, kwargs))
        if (method, path) not in self.routes:
            raise AssertionError(f"Unexpected {method} {path}")
        payload = self.routes[(method, path)]
        if isinstance(payload, Exception):
            raise payload
        if callable(payload):
            payload = payload(**kwargs)
        return StubResponse(payload, status_code=200 if payload is not None else 204)

    def get(self, path, params=None, **kwargs):
        return self._serve("GET", path, params=params)

    def get_json(self, path, params=None):
        return self.get(path, params=params).json()

    def post(self, path, json=None, params=None, **kwargs):
        return self._serve("POST", path, json=json, params=params)

    def put(self, path, json=None, params=None, **kwargs):
        return self._serve("PUT", path, json=json, params=params)

    def delete(self, path, params=None, **kwargs):
        return self._serve("DELETE", path, params=params)


@pytest.fixture()
def fake_cc() -> FakeCloudController:
    return FakeCloudController()


@pytest.fixture()
def operations(fake_cc):
    from cc_client.core.cloud_controller import CloudControllerOperations

    return CloudControllerOperations(fake_cc)


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires a running Cloud Controller)"
    )
