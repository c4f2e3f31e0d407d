"""Cloud Controller v2 API client library.

This package provides a modular, testable interface to the platform's
management API.

Architecture:
- client.py: HTTP client with UAA authentication and auto-refresh
- pagination.py: Page model and lazy concatenation of paginated listings
- roles.py: Org/space roles and their wire tokens
- models.py: Resource records, users, permissions, filters and request bodies
- organizations.py, spaces.py, applications.py, services.py,
  service_bindings.py, users.py, buildpacks.py, quotas.py: one class per endpoint group
- operations.py: CloudControllerOperations facade
- scrubbing.py: logging filter removing credentials from request logs
- exceptions.py: Typed exceptions for error handling

Usage:
    from cc_client.core.cloud_controller import CloudControllerClient, CloudControllerOperations, Role

    client = CloudControllerClient("https://api.example.com")
    client.authenticate_client_credentials("https://uaa.example.com/oauth/token", "admin", "secret")

    cc = CloudControllerOperations(client)
    for org in cc.get_orgs():
        print(org.guid, org.name)
    cc.assign_org_role(user_guid, org_guid, Role.AUDITORS)
"""
from .client import (
    CloudControllerClient,
    create_client_with_token,
    token_expiry,
    CONNECT_TIMEOUT,
    READ_TIMEOUT,
    REQUEST_TIMEOUT,
)
from .exceptions import (
    CloudControllerError,
    CloudControllerAPIError,
    NotAuthenticatedError,
    InvalidRoleForScopeError,
    UnknownRoleTokenError,
)
from .models import (
    AppStatus,
    FilterQuery,
    NewServiceBinding,
    NewServiceInstance,
    NewServiceKey,
    OrgPermission,
    OrgUser,
    Resource,
    User,
)
from .operations import CloudControllerOperations
from .pagination import LogicalSequence, Page, concat_pages
from .roles import (
    Role,
    Scope,
    ORG_ROLES,
    SPACE_ROLES,
    role_to_wire_token,
    role_from_wire_token,
    scope_of_wire_token,
    require_role_in_scope,
    user_spaces_path,
)
from .scrubbing import ScrubbingFilter, scrub

__all__ = [
    # Client
    "CloudControllerClient",
    "create_client_with_token",
    "token_expiry",
    "CONNECT_TIMEOUT",
    "READ_TIMEOUT",
    "REQUEST_TIMEOUT",

    # Exceptions
    "CloudControllerError",
    "CloudControllerAPIError",
    "NotAuthenticatedError",
    "InvalidRoleForScopeError",
    "UnknownRoleTokenError",

    # Models
    "AppStatus",
    "FilterQuery",
    "NewServiceBinding",
    "NewServiceInstance",
    "NewServiceKey",
    "OrgPermission",
    "OrgUser",
    "Resource",
    "User",

    # Facade
    "CloudControllerOperations",

    # Pagination
    "LogicalSequence",
    "Page",
    "concat_pages",

    # Roles
    "Role",
    "Scope",
    "ORG_ROLES",
    "SPACE_ROLES",
    "role_to_wire_token",
    "role_from_wire_token",
    "scope_of_wire_token",
    "require_role_in_scope",
    "user_spaces_path",

    # Logging
    "ScrubbingFilter",
    "scrub",
]
