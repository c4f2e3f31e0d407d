"""Command-line helper for inspecting and administering a Cloud Controller.

This module serves as a CLI wrapper around cc_client.core.cloud_controller.
Every result is printed as one JSON document per line.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cc_client.config import derive_token_url
from cc_client.core.cloud_controller import (
    CloudControllerClient,
    CloudControllerOperations,
    OrgPermission,
    Resource,
    Role,
    Scope,
    User,
    require_role_in_scope,
)
from cc_client.core.cloud_controller.exceptions import (
    CloudControllerAPIError,
    InvalidRoleForScopeError,
)

ROLE_CHOICES = [role.value for role in Role]


def get_client(api_url: str, token_url: str, client_id: str, client_secret: str) -> CloudControllerClient:
    """Return a client authenticated with the client credentials grant."""
    client = CloudControllerClient(api_url)
    client.authenticate_client_credentials(token_url, client_id, client_secret)
    return client


def _to_json(item) -> dict:
    if isinstance(item, OrgPermission):
        return {
            "org": _to_json(item.org),
            "is_manager": item.is_manager,
            "is_auditor": item.is_auditor,
            "is_billing_manager": item.is_billing_manager,
        }
    if isinstance(item, User):
        return {"guid": item.guid, "username": item.username, "roles": [role.value for role in item.roles]}
    if isinstance(item, Resource):
        return {"guid": item.guid, "name": item.name}
    return item


def _emit(items) -> None:
    for item in items:
        print(json.dumps(_to_json(item)))


def main() -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Cloud Controller admin helper")
    parser.add_argument("--api-url", default=os.environ.get("CC_API_URL", "http://localhost:8080"))
    parser.add_argument("--token-url", default=os.environ.get("CC_TOKEN_URL"))
    parser.add_argument("--client-id", default=os.environ.get("CC_CLIENT_ID", "cf"))
    parser.add_argument("--client-secret", default=os.environ.get("CC_CLIENT_SECRET"))
    parser.add_argument("--log-level", default=os.environ.get("CC_LOG_LEVEL", "WARNING"))

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("orgs")

    ss = sub.add_parser("spaces")
    ss.add_argument("--org")

    sc = sub.add_parser("count")
    sc.add_argument("what", choices=["orgs", "spaces", "services", "service-instances", "apps", "buildpacks", "users"])

    sp = sub.add_parser("permissions")
    sp.add_argument("--user", required=True)
    sp.add_argument("--org", action="append", default=[], help="Restrict to this org (repeatable)")

    su = sub.add_parser("org-users")
    su.add_argument("--org", required=True)
    su.add_argument("--role", required=True, choices=ROLE_CHOICES)

    for name in ("assign-org-role", "revoke-org-role"):
        so = sub.add_parser(name)
        so.add_argument("--user", required=True)
        so.add_argument("--org", required=True)
        so.add_argument("--role", required=True, choices=ROLE_CHOICES)

    for name in ("assign-space-role", "revoke-space-role"):
        sr = sub.add_parser(name)
        sr.add_argument("--user", required=True)
        sr.add_argument("--space", required=True)
        sr.add_argument("--role", required=True, choices=ROLE_CHOICES)

    args = parser.parse_args()

    if not args.cmd:
        parser.print_help()
        return

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if not args.client_secret:
        parser.error("Missing client secret (--client-secret or CC_CLIENT_SECRET)")

    token_url = args.token_url or derive_token_url(args.api_url)
    if not token_url:
        parser.error("Missing token URL (--token-url or CC_TOKEN_URL)")

    role = Role(args.role) if getattr(args, "role", None) else None
    if role is not None:
        scope = Scope.SPACE if args.cmd.endswith("space-role") else Scope.ORGANIZATION
        try:
            require_role_in_scope(role, scope)
        except InvalidRoleForScopeError as e:
            parser.error(str(e))

    try:
        cc = CloudControllerOperations(get_client(args.api_url, token_url, args.client_id, args.client_secret))

        if args.cmd == "orgs":
            _emit(cc.get_orgs())
        elif args.cmd == "spaces":
            _emit(cc.get_spaces(args.org))
        elif args.cmd == "count":
            counters = {
                "orgs": cc.get_orgs_count,
                "spaces": cc.get_spaces_count,
                "services": cc.get_services_count,
                "service-instances": cc.get_service_instances_count,
                "apps": cc.get_applications_count,
                "buildpacks": cc.get_buildpacks_count,
                "users": cc.get_users_count,
            }
            print(json.dumps({args.what: counters[args.what]()}))
        elif args.cmd == "permissions":
            _emit(cc.get_user_permissions(args.user, args.org))
        elif args.cmd == "org-users":
            _emit(cc.get_org_users(args.org, role))
        elif args.cmd == "assign-org-role":
            cc.assign_org_role(args.user, args.org, role)
        elif args.cmd == "revoke-org-role":
            cc.revoke_org_role(args.user, args.org, role)
        elif args.cmd == "assign-space-role":
            cc.assign_space_role(args.user, args.space, role)
        elif args.cmd == "revoke-space-role":
            cc.revoke_space_role(args.user, args.space, role)
        else:
            parser.print_help()
    except CloudControllerAPIError as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
