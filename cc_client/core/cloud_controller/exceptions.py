"""Cloud Controller specific exceptions for error handling."""
from __future__ import annotations

from typing import Any


class CloudControllerError(Exception):
    """Base exception for all Cloud Controller operations."""
    pass


class CloudControllerAPIError(CloudControllerError):
    """Non-2xx response from the Cloud Controller API.

    Attributes:
        status_code: HTTP status code
        body: Parsed JSON error body, or raw text when the body is not JSON
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, body: Any, endpoint: str):
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {self.description or body}")

    @property
    def error_code(self) -> str | None:
        """Platform error code such as ``CF-NotAuthorized``."""
        if isinstance(self.body, dict):
            return self.body.get("error_code")
        return None

    @property
    def description(self) -> str | None:
        if isinstance(self.body, dict):
            return self.body.get("description")
        return None


class NotAuthenticatedError(CloudControllerError):
    """No access token available - authenticate before calling the API."""
    pass


class InvalidRoleForScopeError(CloudControllerError, ValueError):
    """Role is not valid for the requested scope (e.g. billing managers of a space)."""

    def __init__(self, role: Any, scope: Any):
        self.role = role
        self.scope = scope
        super().__init__(f"Role {role} is not valid in {scope} scope")


class UnknownRoleTokenError(CloudControllerError, ValueError):
    """Wire role token does not map to any known role."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Role {token} is not a known role type")
