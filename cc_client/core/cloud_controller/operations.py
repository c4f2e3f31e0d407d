"""Domain operations over the Cloud Controller API.

``CloudControllerOperations`` is the single entry point callers use. It
composes the per-endpoint resource groups, translates roles onto their
endpoint conventions and turns paginated listings into lazy sequences.

Listings fetch their first page when the operation is called and every
further page only while the returned iterator is drained. Multi-call
operations (``assign_user_to_organization``, ``assign_user_to_space``) are not
atomic: calls are issued in a fixed order and a failure in a later call leaves
the earlier ones in place.
"""
from __future__ import annotations
import logging
from typing import Any, Collection, Dict, Iterator, List, Optional
from uuid import UUID

from .applications import ApplicationResource
from .buildpacks import BuildpackResource
from .client import CloudControllerClient
from .models import (
    AppStatus,
    FilterQuery,
    NewServiceBinding,
    NewServiceInstance,
    NewServiceKey,
    OrgPermission,
    Resource,
    User,
    is_uuid,
)
from .organizations import OrganizationResource
from .pagination import LogicalSequence, concat_pages
from .quotas import QuotaResource
from .roles import Role, Scope, require_role_in_scope, user_spaces_path
from .service_bindings import ServiceBindingResource
from .services import ServiceResource
from .spaces import SpaceResource
from .users import UserResource

logger = logging.getLogger(__name__)


class CloudControllerOperations:
    """One method per platform operation.

    Usage:
        client = CloudControllerClient("https://api.example.com")
        client.authenticate_client_credentials(token_url, "admin", "secret")
        cc = CloudControllerOperations(client)
        for org in cc.get_orgs():
            print(org.name)
    """

    def __init__(self, client: CloudControllerClient):
        self.client = client
        self.applications = ApplicationResource(client)
        self.organizations = OrganizationResource(client)
        self.services = ServiceResource(client)
        self.service_bindings = ServiceBindingResource(client)
        self.spaces = SpaceResource(client)
        self.users = UserResource(client)
        self.buildpacks = BuildpackResource(client)
        self.quotas = QuotaResource(client)

    # ─────────────────────────────────────────────────────────────────────
    # Applications
    # ─────────────────────────────────────────────────────────────────────
    def get_app_summary(self, app: UUID) -> Dict[str, Any]:
        return self.applications.get_app_summary(app)

    def restage_app(self, app: UUID) -> None:
        self.applications.restage_app(app)

    def get_app_bindings(self, app: UUID, filter_query: Optional[FilterQuery] = None) -> List[Resource]:
        """Bindings of one app. Single page: the listing is not followed."""
        return self.applications.get_app_bindings(app, filter_query).resources

    def delete_app(self, app: UUID) -> None:
        self.applications.delete_app(app)

    def switch_app(self, app: UUID, status: AppStatus) -> None:
        self.applications.switch_app(app, status)

    def get_app_env(self, app: UUID) -> Dict[str, Any]:
        return self.applications.get_app_env(app)

    def get_applications_count(self) -> int:
        return self.applications.get_applications().total_results

    # ─────────────────────────────────────────────────────────────────────
    # Service bindings
    # ─────────────────────────────────────────────────────────────────────
    def create_service_binding(self, binding: NewServiceBinding) -> Resource:
        return self.service_bindings.create_service_binding(binding)

    def delete_service_binding(self, binding: UUID) -> None:
        self.service_bindings.delete_service_binding(binding)

    def get_service_bindings(self, filter_query: FilterQuery) -> List[Resource]:
        """Bindings matching ``filter_query``. Single page: the listing is not followed."""
        return self.service_bindings.get_service_bindings(filter_query).resources

    # ─────────────────────────────────────────────────────────────────────
    # Organizations
    # ─────────────────────────────────────────────────────────────────────
    def create_organization(self, name: str) -> Optional[str]:
        """Create an org and return its guid."""
        return self.organizations.create_organization(name).guid

    def rename_org(self, org: UUID, name: str) -> None:
        self.organizations.update_organization(org, name)

    def delete_org(self, org: UUID) -> None:
        self.organizations.delete_organization(org)

    def get_org(self, org: UUID) -> Resource:
        return self.organizations.get_organization(org)

    def get_orgs(self) -> LogicalSequence[Resource]:
        return concat_pages(self.organizations.get_orgs(), self.organizations.next_page)

    def get_orgs_count(self) -> int:
        return self.organizations.get_orgs().total_results

    def assign_user_to_organization(self, user: UUID, org: UUID) -> None:
        """Make ``user`` a member and then a manager of ``org``.

        Two calls, no rollback: if the second fails the user stays a plain member.
        """
        logger.info("Assigning user %s to org %s as member and manager", user, org)
        self.organizations.associate_user_with_organization(org, user)
        self.organizations.associate_manager_with_organization(org, user)

    def get_org_users(self, org: UUID, role: Role) -> List[User]:
        """All members of ``org`` holding ``role``, every page read."""
        require_role_in_scope(role, Scope.ORGANIZATION)
        members = concat_pages(
            self.organizations.get_organization_users(org, role),
            self.organizations.next_users_page,
        )
        return [User.with_role(member, role) for member in members]

    def get_org_users_with_roles(self, org: UUID) -> Iterator[User]:
        members = concat_pages(
            self.organizations.get_organization_users_with_roles(org),
            self.organizations.next_users_page,
        )
        return (User.with_wire_roles(member) for member in members)

    def assign_org_role(self, user: UUID, org: UUID, role: Role) -> None:
        require_role_in_scope(role, Scope.ORGANIZATION)
        logger.info("Granting org role %s on %s to user %s", role, org, user)
        self.organizations.associate_user_with_organization_role(org, user, role)

    def revoke_org_role(self, user: UUID, org: UUID, role: Role) -> None:
        require_role_in_scope(role, Scope.ORGANIZATION)
        logger.info("Revoking org role %s on %s from user %s", role, org, user)
        self.organizations.remove_organization_role_from_user(org, user, role)

    def get_memory_usage(self, org: UUID) -> Dict[str, Any]:
        return self.organizations.get_memory_usage(org)

    def get_org_summary(self, org: UUID) -> Dict[str, Any]:
        return self.organizations.get_organization_summary(org)

    def get_organization_services(self, org: UUID) -> LogicalSequence[Resource]:
        return concat_pages(self.organizations.get_organization_services(org), self.organizations.next_page)

    # ─────────────────────────────────────────────────────────────────────
    # Spaces
    # ─────────────────────────────────────────────────────────────────────
    def create_space(self, org: UUID, name: str) -> Optional[str]:
        """Create a space in ``org`` and return its guid."""
        return self.spaces.create_space(org, name).guid

    def delete_space(self, space: UUID) -> None:
        self.spaces.remove_space(space)

    def assign_user_to_space(self, user: UUID, space: UUID) -> None:
        """Make ``user`` a developer and then a manager of ``space``. Two calls, no rollback."""
        logger.info("Assigning user %s to space %s as developer and manager", user, space)
        self.spaces.associate_developer_with_space(space, user)
        self.spaces.associate_manager_with_space(space, user)

    def get_space(self, space: UUID) -> Resource:
        return self.spaces.get_space(space)

    def get_spaces(self, org: Optional[UUID] = None) -> LogicalSequence[Resource]:
        """All spaces, or only those of ``org``."""
        if org is None:
            first = self.spaces.get_spaces()
        else:
            first = self.organizations.get_spaces_for_organization(org)
        return concat_pages(first, self.spaces.next_page)

    def get_spaces_count(self) -> int:
        return self.spaces.get_spaces().total_results

    def get_space_summary(self, space: UUID) -> Dict[str, Any]:
        return self.spaces.get_space_summary(space)

    def get_services(self, space: UUID) -> LogicalSequence[Resource]:
        return concat_pages(self.spaces.get_services(space), self.spaces.next_page)

    def get_space_users(self, space: UUID, role: Role) -> List[User]:
        """Members of ``space`` holding ``role``. Single page: the listing is not followed."""
        require_role_in_scope(role, Scope.SPACE)
        page = self.spaces.get_space_users(space, role)
        return [User.with_role(member, role) for member in page.resources]

    def get_space_users_with_roles(self, space: UUID) -> Iterator[User]:
        members = concat_pages(self.spaces.get_space_users_with_roles(space), self.spaces.next_users_page)
        return (User.with_wire_roles(member) for member in members)

    def assign_space_role(self, user: UUID, space: UUID, role: Role) -> None:
        require_role_in_scope(role, Scope.SPACE)
        logger.info("Granting space role %s on %s to user %s", role, space, user)
        self.spaces.associate_user_with_space_role(space, user, role)

    def revoke_space_role(self, user: UUID, space: UUID, role: Role) -> None:
        require_role_in_scope(role, Scope.SPACE)
        logger.info("Revoking space role %s on %s from user %s", role, space, user)
        self.spaces.remove_space_role_from_user(space, user, role)

    # ─────────────────────────────────────────────────────────────────────
    # Services
    # ─────────────────────────────────────────────────────────────────────
    def get_extended_services(self, filter_query: Optional[FilterQuery] = None) -> LogicalSequence[Resource]:
        return concat_pages(self.services.get_services(filter_query), self.services.next_page)

    def get_extended_service_instances(
        self, filter_query: Optional[FilterQuery] = None, depth: Optional[int] = None
    ) -> LogicalSequence[Resource]:
        return concat_pages(
            self.services.get_extended_service_instances(filter_query, depth),
            self.services.next_page,
        )

    def get_extended_service_plans(self, service: UUID) -> LogicalSequence[Resource]:
        return concat_pages(self.services.get_extended_service_plans(service), self.services.next_page)

    def get_service(self, service: UUID) -> Resource:
        return self.services.get_service(service)

    def get_service_keys(self) -> LogicalSequence[Resource]:
        return concat_pages(self.services.get_service_keys(), self.services.next_page)

    def create_service_key(self, key: NewServiceKey) -> Resource:
        return self.services.create_service_key(key)

    def delete_service_key(self, key: UUID) -> None:
        self.services.delete_service_key(key)

    def set_extended_service_plan_visibility(self, service_plan: UUID, org: UUID) -> Resource:
        return self.services.set_service_plan_visibility(service_plan, org)

    def get_extended_service_plan_visibility(
        self, filter_query: Optional[FilterQuery] = None
    ) -> LogicalSequence[Resource]:
        return concat_pages(self.services.get_service_plan_visibility(filter_query), self.services.next_page)

    def create_service_instance(self, instance: NewServiceInstance) -> Resource:
        return self.services.create_service_instance(instance)

    def delete_service_instance(self, instance: UUID) -> None:
        self.services.delete_service_instance(instance)

    def get_services_count(self) -> int:
        return self.services.get_services().total_results

    def get_service_instances_count(self) -> int:
        return self.services.get_extended_service_instances().total_results

    # ─────────────────────────────────────────────────────────────────────
    # Users
    # ─────────────────────────────────────────────────────────────────────
    def create_user(self, user: UUID) -> None:
        self.users.create_user(user)

    def delete_user(self, user: UUID) -> None:
        self.users.delete_user(user)

    def get_users(self) -> Iterator[Resource]:
        """Platform users. System accounts (guid not a UUID) are skipped."""
        users = concat_pages(self.users.get_users(), self.users.next_page)
        return (user for user in users if is_uuid(user.guid))

    def get_users_count(self) -> int:
        return self.users.get_users_count()

    def get_managed_organizations(self, user: UUID) -> List[Resource]:
        return self.users.get_managed_organizations(user)

    def get_audited_organizations(self, user: UUID) -> List[Resource]:
        return self.users.get_audited_organizations(user)

    def get_billing_managed_organizations(self, user: UUID) -> List[Resource]:
        return self.users.get_billing_managed_organizations(user)

    def get_user_orgs(self, user: UUID) -> List[Resource]:
        return self.users.get_user_organizations(user)

    def get_users_spaces(self, user: UUID, role: Role, filter_query: Optional[FilterQuery] = None) -> List[Resource]:
        """Spaces where ``user`` is a manager, auditor or developer."""
        return self.users.get_user_spaces(user, user_spaces_path(role), filter_query)

    def get_user_permissions(self, user: UUID, orgs_filter: Collection[UUID] = ()) -> List[OrgPermission]:
        """Role flags of ``user`` in each org they belong to.

        The membership list and the three role lists are each read from a
        single page (the platform default of 50 orgs); memberships past that
        page are not reported.

        Args:
            user: User guid
            orgs_filter: Org guids to keep, any case; empty keeps every org

        Returns:
            One OrgPermission per (filtered) membership, in membership order
        """
        orgs = self.users.get_user_organizations(user)

        wanted = {str(guid).lower() for guid in orgs_filter}
        if wanted:
            orgs = [org for org in orgs if (org.guid or "").lower() in wanted]

        managed = set(self.get_managed_organizations(user))
        audited = set(self.get_audited_organizations(user))
        billing_managed = set(self.get_billing_managed_organizations(user))

        return [
            OrgPermission(
                org,
                is_manager=org in managed,
                is_auditor=org in audited,
                is_billing_manager=org in billing_managed,
            )
            for org in orgs
        ]

    # ─────────────────────────────────────────────────────────────────────
    # Buildpacks & quotas
    # ─────────────────────────────────────────────────────────────────────
    def get_buildpacks(self) -> LogicalSequence[Resource]:
        return concat_pages(self.buildpacks.get_buildpacks(), self.buildpacks.next_page)

    def get_buildpacks_count(self) -> int:
        return self.buildpacks.get_buildpacks().total_results

    def get_quota(self) -> LogicalSequence[Resource]:
        return concat_pages(self.quotas.get_quota(), self.quotas.next_page)
