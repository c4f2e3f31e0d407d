"""
Unit tests for cc_client.core.cloud_controller.operations

Drives CloudControllerOperations against a fake transport that serves canned
Cloud Controller pages and records every call.
"""
import uuid

import pytest

from cc_client.core.cloud_controller import (
    AppStatus,
    CloudControllerAPIError,
    FilterQuery,
    InvalidRoleForScopeError,
    NewServiceBinding,
    NewServiceInstance,
    NewServiceKey,
    Role,
)
from tests.conftest import make_page, make_resource

USER = "7c9c5a1e-3f55-4d5b-9f5e-2f6a0d2b1c11"
ORG_A = "a0000000-0000-0000-0000-00000000000a"
ORG_B = "b0000000-0000-0000-0000-00000000000b"
ORG_C = "c0000000-0000-0000-0000-00000000000c"
SPACE = "5pace000-0000-0000-0000-000000000000"


def org(guid, name=None):
    return make_resource(guid, name or guid[:1])


# ============================================================================
# Enumeration
# ============================================================================

def test_get_orgs_follows_every_page(fake_cc, operations):
    fake_cc.route("GET", "/v2/organizations", make_page([org(ORG_A)], next_url="/v2/organizations?page=2", total_results=3))
    fake_cc.route("GET", "/v2/organizations?page=2", make_page([org(ORG_B)], next_url="/v2/organizations?page=3"))
    fake_cc.route("GET", "/v2/organizations?page=3", make_page([org(ORG_C)]))

    guids = [o.guid for o in operations.get_orgs()]

    assert guids == [ORG_A, ORG_B, ORG_C]
    assert len(fake_cc.calls_to("GET")) == 3


def test_get_orgs_fetches_first_page_eagerly_and_nothing_more_until_consumed(fake_cc, operations):
    fake_cc.route("GET", "/v2/organizations", make_page([org(ORG_A), org(ORG_B)], next_url="/v2/organizations?page=2"))

    orgs = operations.get_orgs()
    assert len(fake_cc.calls) == 1

    first = next(orgs)
    assert first.guid == ORG_A
    assert len(fake_cc.calls) == 1


def test_get_spaces_of_org_uses_org_listing_and_space_continuation(fake_cc, operations):
    fake_cc.route(
        "GET",
        f"/v2/organizations/{ORG_A}/spaces",
        make_page([make_resource("s1", "dev")], next_url="/v2/spaces?page=2"),
    )
    fake_cc.route("GET", "/v2/spaces?page=2", make_page([make_resource("s2", "prod")]))

    names = [s.name for s in operations.get_spaces(ORG_A)]

    assert names == ["dev", "prod"]
    assert fake_cc.calls[0][2]["params"] == {"inline-relations-depth": 1}


def test_get_spaces_without_org_lists_all_spaces(fake_cc, operations):
    fake_cc.route("GET", "/v2/spaces", make_page([make_resource("s1", "dev")]))

    assert [s.name for s in operations.get_spaces()] == ["dev"]


def test_extended_service_instances_pass_filter_and_depth(fake_cc, operations):
    fake_cc.route("GET", "/v2/service_instances", make_page([make_resource("i1", "db")]))

    instances = list(operations.get_extended_service_instances(FilterQuery("space_guid", SPACE), depth=1))

    assert [i.name for i in instances] == ["db"]
    assert fake_cc.calls[0][2]["params"] == {"q": f"space_guid:{SPACE}", "inline-relations-depth": 1}


@pytest.mark.parametrize(
    "operation,path",
    [
        ("get_extended_services", "/v2/services"),
        ("get_service_keys", "/v2/service_keys"),
        ("get_buildpacks", "/v2/buildpacks"),
        ("get_quota", "/v2/quota_definitions"),
        ("get_extended_service_plan_visibility", "/v2/service_plan_visibilities"),
    ],
)
def test_listings_concatenate_pages(fake_cc, operations, operation, path):
    fake_cc.route("GET", path, make_page([make_resource("r1")], next_url=f"{path}?page=2"))
    fake_cc.route("GET", f"{path}?page=2", make_page([make_resource("r2")]))

    assert [r.guid for r in getattr(operations, operation)()] == ["r1", "r2"]


def test_get_users_skips_system_accounts(fake_cc, operations):
    fake_cc.route(
        "GET",
        "/v2/users",
        make_page([make_resource(USER, username="alice"), make_resource("admin", username="admin")],
                  next_url="/v2/users?page=2"),
    )
    other = str(uuid.uuid4())
    fake_cc.route("GET", "/v2/users?page=2", make_page([make_resource(other)]))

    assert [u.guid for u in operations.get_users()] == [USER, other]


# ============================================================================
# Counts
# ============================================================================

@pytest.mark.parametrize(
    "operation,path",
    [
        ("get_orgs_count", "/v2/organizations"),
        ("get_spaces_count", "/v2/spaces"),
        ("get_services_count", "/v2/services"),
        ("get_service_instances_count", "/v2/service_instances"),
        ("get_applications_count", "/v2/apps"),
        ("get_buildpacks_count", "/v2/buildpacks"),
    ],
)
def test_count_reads_total_from_a_single_page(fake_cc, operations, operation, path):
    fake_cc.route("GET", path, make_page([make_resource() for _ in range(50)], next_url=f"{path}?page=2", total_results=137))

    assert getattr(operations, operation)() == 137
    assert len(fake_cc.calls) == 1


def test_users_count_requests_one_result(fake_cc, operations):
    fake_cc.route("GET", "/v2/users", make_page([make_resource()], next_url="/v2/users?page=2", total_results=137))

    assert operations.get_users_count() == 137
    assert fake_cc.calls == [("GET", "/v2/users", {"params": {"results-per-page": 1}})]


# ============================================================================
# Permissions
# ============================================================================

@pytest.fixture
def memberships(fake_cc):
    fake_cc.route("GET", f"/v2/users/{USER}/organizations", make_page([org(ORG_A), org(ORG_B), org(ORG_C)]))
    fake_cc.route("GET", f"/v2/users/{USER}/managed_organizations", make_page([org(ORG_A, "renamed")]))
    fake_cc.route("GET", f"/v2/users/{USER}/audited_organizations", make_page([org(ORG_B)]))
    fake_cc.route("GET", f"/v2/users/{USER}/billing_managed_organizations", make_page([]))


def flags(permission):
    return (permission.is_manager, permission.is_auditor, permission.is_billing_manager)


def test_user_permissions_without_filter(operations, memberships):
    permissions = operations.get_user_permissions(USER, [])

    assert [p.org.guid for p in permissions] == [ORG_A, ORG_B, ORG_C]
    assert [flags(p) for p in permissions] == [
        (True, False, False),
        (False, True, False),
        (False, False, False),
    ]


def test_user_permissions_with_filter(operations, memberships):
    permissions = operations.get_user_permissions(USER, [uuid.UUID(ORG_A), ORG_C])

    assert [p.org.guid for p in permissions] == [ORG_A, ORG_C]
    assert [flags(p) for p in permissions] == [(True, False, False), (False, False, False)]


def test_user_permissions_match_orgs_by_guid_not_by_content(operations, memberships):
    # the managed listing carries a different name for ORG_A; identity is the guid
    permissions = operations.get_user_permissions(USER)

    assert permissions[0].org.name == "a"
    assert permissions[0].is_manager


def test_user_permissions_filter_matching_nothing_returns_nothing(operations, memberships):
    assert operations.get_user_permissions(USER, [str(uuid.uuid4())]) == []


def test_user_permissions_filter_ignores_guid_case(operations, memberships):
    permissions = operations.get_user_permissions(USER, [ORG_A.upper(), ORG_C])

    assert [p.org.guid for p in permissions] == [ORG_A, ORG_C]


def test_user_permissions_read_one_page_per_listing(fake_cc, operations):
    fake_cc.route(
        "GET",
        f"/v2/users/{USER}/organizations",
        make_page([org(ORG_A)], next_url=f"/v2/users/{USER}/organizations?page=2", total_results=51),
    )
    fake_cc.route("GET", f"/v2/users/{USER}/managed_organizations", make_page([org(ORG_A)]))
    fake_cc.route("GET", f"/v2/users/{USER}/audited_organizations", make_page([]))
    fake_cc.route("GET", f"/v2/users/{USER}/billing_managed_organizations", make_page([]))

    permissions = operations.get_user_permissions(USER)

    assert [p.org.guid for p in permissions] == [ORG_A]
    assert len(fake_cc.calls) == 4


# ============================================================================
# Roles and members
# ============================================================================

def test_get_org_users_reads_every_page(fake_cc, operations):
    fake_cc.route(
        "GET",
        f"/v2/organizations/{ORG_A}/auditors",
        make_page([make_resource("u1", username="alice")], next_url="/v2/users?page=2"),
    )
    fake_cc.route("GET", "/v2/users?page=2", make_page([make_resource("u2", username="bob")]))

    users = operations.get_org_users(ORG_A, Role.AUDITORS)

    assert [(u.username, u.guid, u.roles) for u in users] == [
        ("alice", "u1", [Role.AUDITORS]),
        ("bob", "u2", [Role.AUDITORS]),
    ]


def test_get_space_users_reads_a_single_page(fake_cc, operations):
    fake_cc.route(
        "GET",
        f"/v2/spaces/{SPACE}/developers",
        make_page([make_resource("u1", username="alice")], next_url="/v2/users?page=2"),
    )

    users = operations.get_space_users(SPACE, Role.DEVELOPERS)

    assert [u.username for u in users] == ["alice"]
    assert len(fake_cc.calls) == 1


def test_users_with_roles_translate_wire_tokens(fake_cc, operations):
    fake_cc.route(
        "GET",
        f"/v2/organizations/{ORG_A}/user_roles",
        make_page([make_resource("u1", username="alice", organization_roles=["org_user", "org_manager", "org_owner"])]),
    )

    users = list(operations.get_org_users_with_roles(ORG_A))

    assert users[0].roles == [Role.USERS, Role.MANAGERS]


def test_space_users_with_roles(fake_cc, operations):
    fake_cc.route(
        "GET",
        f"/v2/spaces/{SPACE}/user_roles",
        make_page([make_resource("u1", username="alice", space_roles=["space_developer", "space_auditor"])]),
    )

    users = list(operations.get_space_users_with_roles(SPACE))

    assert users[0].roles == [Role.DEVELOPERS, Role.AUDITORS]


def test_assign_and_revoke_org_role_use_role_path_segment(fake_cc, operations):
    fake_cc.route("PUT", f"/v2/organizations/{ORG_A}/billing_managers/{USER}")
    fake_cc.route("DELETE", f"/v2/organizations/{ORG_A}/billing_managers/{USER}")

    operations.assign_org_role(USER, ORG_A, Role.BILLING_MANAGERS)
    operations.revoke_org_role(USER, ORG_A, Role.BILLING_MANAGERS)

    assert [(m, p) for m, p, _ in fake_cc.calls] == [
        ("PUT", f"/v2/organizations/{ORG_A}/billing_managers/{USER}"),
        ("DELETE", f"/v2/organizations/{ORG_A}/billing_managers/{USER}"),
    ]


def test_assign_and_revoke_space_role(fake_cc, operations):
    fake_cc.route("PUT", f"/v2/spaces/{SPACE}/auditors/{USER}")
    fake_cc.route("DELETE", f"/v2/spaces/{SPACE}/auditors/{USER}")

    operations.assign_space_role(USER, SPACE, Role.AUDITORS)
    operations.revoke_space_role(USER, SPACE, Role.AUDITORS)

    assert len(fake_cc.calls) == 2


@pytest.mark.parametrize(
    "operation,args",
    [
        ("assign_space_role", (USER, SPACE, Role.BILLING_MANAGERS)),
        ("revoke_space_role", (USER, SPACE, Role.USERS)),
        ("get_space_users", (SPACE, Role.BILLING_MANAGERS)),
        ("assign_org_role", (USER, ORG_A, Role.DEVELOPERS)),
        ("revoke_org_role", (USER, ORG_A, Role.DEVELOPERS)),
        ("get_org_users", (ORG_A, Role.DEVELOPERS)),
        ("get_users_spaces", (USER, Role.USERS)),
    ],
)
def test_invalid_role_for_scope_fails_before_any_call(fake_cc, operations, operation, args):
    with pytest.raises(InvalidRoleForScopeError):
        getattr(operations, operation)(*args)

    assert fake_cc.calls == []


def test_get_users_spaces_maps_role_to_relation(fake_cc, operations):
    fake_cc.route("GET", f"/v2/users/{USER}/managed_spaces", make_page([make_resource("s1", "dev")]))

    spaces = operations.get_users_spaces(USER, Role.MANAGERS, FilterQuery("organization_guid", ORG_A))

    assert [s.name for s in spaces] == ["dev"]
    assert fake_cc.calls[0][2]["params"] == {"q": f"organization_guid:{ORG_A}"}


# ============================================================================
# Composite mutations
# ============================================================================

def test_assign_user_to_organization_associates_then_promotes(fake_cc, operations):
    fake_cc.route("PUT", f"/v2/organizations/{ORG_A}/users/{USER}")
    fake_cc.route("PUT", f"/v2/organizations/{ORG_A}/managers/{USER}")

    operations.assign_user_to_organization(USER, ORG_A)

    assert [p for _, p, _ in fake_cc.calls] == [
        f"/v2/organizations/{ORG_A}/users/{USER}",
        f"/v2/organizations/{ORG_A}/managers/{USER}",
    ]


def test_assign_user_to_organization_reports_second_failure_without_rollback(fake_cc, operations):
    fake_cc.route("PUT", f"/v2/organizations/{ORG_A}/users/{USER}")
    fake_cc.fail("PUT", f"/v2/organizations/{ORG_A}/managers/{USER}", 403, {"error_code": "CF-NotAuthorized"})

    with pytest.raises(CloudControllerAPIError) as exc:
        operations.assign_user_to_organization(USER, ORG_A)

    assert exc.value.status_code == 403
    assert exc.value.endpoint == f"/v2/organizations/{ORG_A}/managers/{USER}"
    assert len(fake_cc.calls) == 2
    assert fake_cc.calls_to("DELETE") == []


def test_assign_user_to_organization_stops_after_first_failure(fake_cc, operations):
    fake_cc.fail("PUT", f"/v2/organizations/{ORG_A}/users/{USER}", 404)

    with pytest.raises(CloudControllerAPIError):
        operations.assign_user_to_organization(USER, ORG_A)

    assert len(fake_cc.calls) == 1


def test_assign_user_to_space_adds_developer_then_manager(fake_cc, operations):
    fake_cc.route("PUT", f"/v2/spaces/{SPACE}/developers/{USER}")
    fake_cc.fail("PUT", f"/v2/spaces/{SPACE}/managers/{USER}", 500)

    with pytest.raises(CloudControllerAPIError) as exc:
        operations.assign_user_to_space(USER, SPACE)

    assert exc.value.endpoint == f"/v2/spaces/{SPACE}/managers/{USER}"
    assert [m for m, _, _ in fake_cc.calls] == ["PUT", "PUT"]


# ============================================================================
# Single objects and plain mutations
# ============================================================================

def test_create_organization_returns_guid(fake_cc, operations):
    fake_cc.route("POST", "/v2/organizations", make_resource(ORG_A, "acme"))

    assert operations.create_organization("acme") == ORG_A
    assert fake_cc.calls[0][2]["json"] == {"name": "acme"}


def test_create_space_returns_guid(fake_cc, operations):
    fake_cc.route("POST", "/v2/spaces", make_resource(SPACE, "dev"))

    assert operations.create_space(ORG_A, "dev") == SPACE
    assert fake_cc.calls[0][2]["json"] == {"organization_guid": ORG_A, "name": "dev"}


def test_rename_and_delete_org(fake_cc, operations):
    fake_cc.route("PUT", f"/v2/organizations/{ORG_A}")
    fake_cc.route("DELETE", f"/v2/organizations/{ORG_A}")

    operations.rename_org(ORG_A, "new-name")
    operations.delete_org(ORG_A)

    assert fake_cc.calls[0][2]["json"] == {"name": "new-name"}
    assert fake_cc.calls[1][2]["params"] == {"async": "true", "recursive": "true"}


def test_delete_space(fake_cc, operations):
    fake_cc.route("DELETE", f"/v2/spaces/{SPACE}")

    operations.delete_space(SPACE)

    assert fake_cc.calls[0][2]["params"] == {"async": "true", "recursive": "true"}


def test_get_org_and_space(fake_cc, operations):
    fake_cc.route("GET", f"/v2/organizations/{ORG_A}", make_resource(ORG_A, "acme", status="active"))
    fake_cc.route("GET", f"/v2/spaces/{SPACE}", make_resource(SPACE, "dev"))

    assert operations.get_org(ORG_A).entity["status"] == "active"
    assert operations.get_space(SPACE).name == "dev"


def test_switch_app_sends_state(fake_cc, operations):
    app = str(uuid.uuid4())
    fake_cc.route("PUT", f"/v2/apps/{app}")

    operations.switch_app(app, AppStatus.STOPPED)

    assert fake_cc.calls[0][2]["json"] == {"state": "STOPPED"}


def test_app_operations(fake_cc, operations):
    app = str(uuid.uuid4())
    fake_cc.route("GET", f"/v2/apps/{app}/summary", {"name": "web", "instances": 2})
    fake_cc.route("GET", f"/v2/apps/{app}/env", {"system_env_json": {}})
    fake_cc.route("POST", f"/v2/apps/{app}/restage")
    fake_cc.route("DELETE", f"/v2/apps/{app}")
    fake_cc.route("GET", f"/v2/apps/{app}/service_bindings", make_page([make_resource("b1")], next_url="/more"))

    assert operations.get_app_summary(app)["instances"] == 2
    assert operations.get_app_env(app) == {"system_env_json": {}}
    operations.restage_app(app)
    operations.delete_app(app)
    assert [b.guid for b in operations.get_app_bindings(app)] == ["b1"]


def test_service_bindings_are_a_single_page(fake_cc, operations):
    fake_cc.route("GET", "/v2/service_bindings", make_page([make_resource("b1")], next_url="/v2/service_bindings?page=2"))

    bindings = operations.get_service_bindings(FilterQuery("app_guid", "app-1"))

    assert [b.guid for b in bindings] == ["b1"]
    assert len(fake_cc.calls) == 1
    assert fake_cc.calls[0][2]["params"] == {"q": "app_guid:app-1"}


def test_create_and_delete_service_binding(fake_cc, operations):
    fake_cc.route("POST", "/v2/service_bindings", make_resource("b1"))
    fake_cc.route("DELETE", "/v2/service_bindings/b1")

    binding = operations.create_service_binding(NewServiceBinding("app-1", "inst-1"))
    operations.delete_service_binding(binding.guid)

    assert fake_cc.calls[0][2]["json"] == {"app_guid": "app-1", "service_instance_guid": "inst-1"}


def test_create_service_instance_and_key(fake_cc, operations):
    fake_cc.route("POST", "/v2/service_instances", make_resource("i1", "db"))
    fake_cc.route("POST", "/v2/service_keys", make_resource("k1", "key"))
    fake_cc.route("DELETE", "/v2/service_keys/k1")
    fake_cc.route("DELETE", "/v2/service_instances/i1")

    instance = operations.create_service_instance(NewServiceInstance("db", SPACE, "plan-1", parameters={"size": "s"}))
    key = operations.create_service_key(NewServiceKey("key", instance.guid))
    operations.delete_service_key(key.guid)
    operations.delete_service_instance(instance.guid)

    assert fake_cc.calls[0][2]["json"] == {
        "name": "db",
        "space_guid": SPACE,
        "service_plan_guid": "plan-1",
        "parameters": {"size": "s"},
    }
    assert fake_cc.calls[0][2]["params"] == {"accepts_incomplete": "false"}
    assert fake_cc.calls[1][2]["json"] == {"name": "key", "service_instance_guid": "i1"}


def test_set_service_plan_visibility(fake_cc, operations):
    fake_cc.route("POST", "/v2/service_plan_visibilities", make_resource("v1"))

    visibility = operations.set_extended_service_plan_visibility("plan-1", ORG_A)

    assert visibility.guid == "v1"
    assert fake_cc.calls[0][2]["json"] == {"service_plan_guid": "plan-1", "organization_guid": ORG_A}


def test_user_lifecycle(fake_cc, operations):
    fake_cc.route("POST", "/v2/users")
    fake_cc.route("DELETE", f"/v2/users/{USER}")

    operations.create_user(uuid.UUID(USER))
    operations.delete_user(USER)

    assert fake_cc.calls[0][2]["json"] == {"guid": USER}
    assert fake_cc.calls[1][2]["params"] == {"async": "false"}


def test_org_and_space_summaries(fake_cc, operations):
    fake_cc.route("GET", f"/v2/organizations/{ORG_A}/memory_usage", {"memory_usage_in_mb": 512})
    fake_cc.route("GET", f"/v2/organizations/{ORG_A}/summary", {"name": "acme", "spaces": []})
    fake_cc.route("GET", f"/v2/spaces/{SPACE}/summary", {"apps": [], "services": []})

    assert operations.get_memory_usage(ORG_A) == {"memory_usage_in_mb": 512}
    assert operations.get_org_summary(ORG_A)["name"] == "acme"
    assert operations.get_space_summary(SPACE) == {"apps": [], "services": []}


def test_services_of_org_and_space_and_plans(fake_cc, operations):
    fake_cc.route("GET", f"/v2/organizations/{ORG_A}/services", make_page([make_resource("svc1")]))
    fake_cc.route("GET", f"/v2/spaces/{SPACE}/services", make_page([make_resource("svc2")]))
    fake_cc.route("GET", "/v2/services/svc1/service_plans", make_page([make_resource("plan1")]))
    fake_cc.route("GET", "/v2/services/svc1", make_resource("svc1", label="postgres"))

    assert [s.guid for s in operations.get_organization_services(ORG_A)] == ["svc1"]
    assert [s.guid for s in operations.get_services(SPACE)] == ["svc2"]
    assert [p.guid for p in operations.get_extended_service_plans("svc1")] == ["plan1"]
    assert operations.get_service("svc1").entity["label"] == "postgres"
