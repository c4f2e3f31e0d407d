"""Domain objects exchanged with the Cloud Controller API.

The v2 API wraps almost every record as ``{"metadata": {...}, "entity": {...}}``.
Rather than one class per record type, ``Resource`` keeps both halves as plain
dicts and exposes the handful of fields callers routinely need. Unknown fields
stay in the dicts and are otherwise ignored.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .exceptions import UnknownRoleTokenError
from .roles import Role, role_from_wire_token

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Resource:
    """A ``{metadata, entity}`` record. Two resources are equal when their guids are."""

    metadata: Dict[str, Any] = field(default_factory=dict)
    entity: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "Resource":
        return cls(metadata=dict(payload.get("metadata") or {}), entity=dict(payload.get("entity") or {}))

    @property
    def guid(self) -> Optional[str]:
        return self.metadata.get("guid")

    @property
    def name(self) -> Optional[str]:
        return self.entity.get("name")

    @property
    def url(self) -> Optional[str]:
        return self.metadata.get("url")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return self.guid is not None and self.guid == other.guid

    def __hash__(self) -> int:
        return hash(self.guid)


@dataclass(eq=False)
class OrgUser(Resource):
    """Member entry from ``/{role}`` and ``/user_roles`` listings."""

    @property
    def username(self) -> Optional[str]:
        return self.entity.get("username")

    @property
    def role_tokens(self) -> List[str]:
        return list(self.entity.get("organization_roles") or self.entity.get("space_roles") or [])


@dataclass
class User:
    username: Optional[str]
    guid: Optional[str]
    roles: List[Role] = field(default_factory=list)

    @classmethod
    def with_role(cls, member: OrgUser, role: Role) -> "User":
        return cls(member.username, member.guid, [role])

    @classmethod
    def with_wire_roles(cls, member: OrgUser) -> "User":
        """Build a user from a ``user_roles`` entry. Tokens this client does not know are dropped."""
        roles = []
        for token in member.role_tokens:
            try:
                roles.append(role_from_wire_token(token))
            except UnknownRoleTokenError:
                logger.debug("Dropping unknown role token %s for user %s", token, member.guid)
                continue
        return cls(member.username, member.guid, roles)


@dataclass
class OrgPermission:
    org: Resource
    is_manager: bool = False
    is_auditor: bool = False
    is_billing_manager: bool = False


class AppStatus(str, Enum):
    STARTED = "STARTED"
    STOPPED = "STOPPED"


FILTER_OPERATORS = (":", ">=", "<=", "<", ">", " IN ")


@dataclass(frozen=True)
class FilterQuery:
    """A ``q=`` listing filter, e.g. ``FilterQuery("name", "dev")`` -> ``q=name:dev``.

    For the `` IN `` operator pass a list of values; they are comma joined.
    """

    name: str
    value: Any
    operator: str = ":"

    def __post_init__(self) -> None:
        if self.operator not in FILTER_OPERATORS:
            raise ValueError(f"Unsupported filter operator '{self.operator}'")

    @classmethod
    def by_name(cls, name: str) -> "FilterQuery":
        return cls("name", name)

    def __str__(self) -> str:
        value = self.value
        if isinstance(value, (list, tuple, set, frozenset)):
            value = ",".join(str(v) for v in value)
        return f"{self.name}{self.operator}{value}"

    def to_params(self) -> Dict[str, str]:
        return {"q": str(self)}


def _drop_unset(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass
class NewServiceInstance:
    name: str
    space_guid: str
    service_plan_guid: str
    parameters: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None

    def to_json(self) -> Dict[str, Any]:
        return _drop_unset({
            "name": self.name,
            "space_guid": str(self.space_guid),
            "service_plan_guid": str(self.service_plan_guid),
            "parameters": self.parameters,
            "tags": self.tags,
        })


@dataclass
class NewServiceKey:
    name: str
    service_instance_guid: str
    parameters: Optional[Dict[str, Any]] = None

    def to_json(self) -> Dict[str, Any]:
        return _drop_unset({
            "name": self.name,
            "service_instance_guid": str(self.service_instance_guid),
            "parameters": self.parameters,
        })


@dataclass
class NewServiceBinding:
    app_guid: str
    service_instance_guid: str
    parameters: Optional[Dict[str, Any]] = None

    def to_json(self) -> Dict[str, Any]:
        return _drop_unset({
            "app_guid": str(self.app_guid),
            "service_instance_guid": str(self.service_instance_guid),
            "parameters": self.parameters,
        })


def is_uuid(value: Any) -> bool:
    """True when ``value`` parses as a UUID. System accounts carry non-UUID guids."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
