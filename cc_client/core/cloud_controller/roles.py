"""Organization and space roles and their wire representations.

A role appears on the wire in three shapes:

- as a URL path segment, the enum value (``/v2/organizations/{org}/managers``);
- as a scoped token in ``user_roles`` listings (``org_manager``, ``space_developer``);
- as a user-spaces relation (``/v2/users/{user}/managed_spaces``).

The tables below are built once at import, checked for consistency, and never
mutated afterwards.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .exceptions import InvalidRoleForScopeError, UnknownRoleTokenError


class Role(str, Enum):
    MANAGERS = "managers"
    BILLING_MANAGERS = "billing_managers"
    AUDITORS = "auditors"
    DEVELOPERS = "developers"
    USERS = "users"  # every org member holds it alongside any other role

    def __str__(self) -> str:
        return self.value


class Scope(str, Enum):
    ORGANIZATION = "organization"
    SPACE = "space"

    def __str__(self) -> str:
        return self.value


ORG_ROLES = frozenset({Role.MANAGERS, Role.BILLING_MANAGERS, Role.AUDITORS, Role.USERS})
SPACE_ROLES = frozenset({Role.MANAGERS, Role.AUDITORS, Role.DEVELOPERS})

ROLES_BY_SCOPE: Mapping[Scope, frozenset] = MappingProxyType({
    Scope.ORGANIZATION: ORG_ROLES,
    Scope.SPACE: SPACE_ROLES,
})


def _build_wire_tables(
    tokens: dict[Scope, dict[Role, str]],
) -> tuple[Mapping[Scope, Mapping[Role, str]], Mapping[str, tuple[Role, Scope]]]:
    forward: dict[Scope, Mapping[Role, str]] = {}
    reverse: dict[str, tuple[Role, Scope]] = {}
    for scope, valid_roles in ROLES_BY_SCOPE.items():
        table = tokens[scope]
        if set(table) != set(valid_roles):
            raise RuntimeError(f"Wire tokens for {scope} scope do not cover exactly {sorted(valid_roles)}")
        for role, token in table.items():
            if token in reverse:
                raise RuntimeError(f"Wire token {token} is mapped twice")
            reverse[token] = (role, scope)
        forward[scope] = MappingProxyType(dict(table))
    return MappingProxyType(forward), MappingProxyType(reverse)


WIRE_TOKENS, _ROLES_BY_TOKEN = _build_wire_tables({
    Scope.ORGANIZATION: {
        Role.MANAGERS: "org_manager",
        Role.BILLING_MANAGERS: "billing_manager",
        Role.AUDITORS: "org_auditor",
        Role.USERS: "org_user",
    },
    Scope.SPACE: {
        Role.MANAGERS: "space_manager",
        Role.AUDITORS: "space_auditor",
        Role.DEVELOPERS: "space_developer",
    },
})

# /v2/users/{user}/<relation>
USER_SPACES_PATHS: Mapping[Role, str] = MappingProxyType({
    Role.MANAGERS: "managed_spaces",
    Role.AUDITORS: "audited_spaces",
    Role.DEVELOPERS: "spaces",
})


def require_role_in_scope(role: Role, scope: Scope) -> Role:
    """Return ``role`` unchanged, or raise InvalidRoleForScopeError."""
    if role not in ROLES_BY_SCOPE[scope]:
        raise InvalidRoleForScopeError(role, scope)
    return role


def role_to_wire_token(role: Role, scope: Scope) -> str:
    """Map a role to its scoped wire token, e.g. (DEVELOPERS, SPACE) -> ``space_developer``."""
    require_role_in_scope(role, scope)
    return WIRE_TOKENS[scope][role]


def role_from_wire_token(token: str) -> Role:
    """Reverse of role_to_wire_token."""
    try:
        return _ROLES_BY_TOKEN[token][0]
    except KeyError:
        raise UnknownRoleTokenError(token) from None


def scope_of_wire_token(token: str) -> Scope:
    try:
        return _ROLES_BY_TOKEN[token][1]
    except KeyError:
        raise UnknownRoleTokenError(token) from None


def user_spaces_path(role: Role) -> str:
    """Relation under /v2/users/{user} listing the spaces where the user holds ``role``."""
    try:
        return USER_SPACES_PATHS[role]
    except KeyError:
        raise InvalidRoleForScopeError(role, Scope.SPACE) from None
