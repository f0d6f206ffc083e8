import logging
from copy import deepcopy
from typing import Iterable

from django.conf import settings
from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_AGENT = "agent"
ROLE_CLIENT = "client"
ROLE_CLAIMS = "claims"
ROLE_ACCOUNTANT = "accountant"

VALID_ROLES = frozenset((ROLE_ADMIN, ROLE_AGENT, ROLE_CLIENT, ROLE_CLAIMS, ROLE_ACCOUNTANT))
VALID_METHODS = frozenset(("GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE", "*"))

STAFF_ROLES = frozenset((ROLE_ADMIN, ROLE_AGENT, ROLE_CLAIMS, ROLE_ACCOUNTANT))
ALL_ROLES = VALID_ROLES
WRITE_ROLES = frozenset((ROLE_ADMIN, ROLE_AGENT))
ADMIN_ROLES = frozenset((ROLE_ADMIN,))
CLAIMS_ROLES = frozenset((ROLE_ADMIN, ROLE_CLAIMS))
FINANCE_ROLES = frozenset((ROLE_ADMIN, ROLE_ACCOUNTANT))
NO_ROLES = frozenset()


def build_role_matrix(
    *,
    read_roles=STAFF_ROLES,
    post_roles=WRITE_ROLES,
    put_roles=WRITE_ROLES,
    patch_roles=WRITE_ROLES,
    delete_roles=ADMIN_ROLES,
):
    return {
        "GET": frozenset(read_roles),
        "HEAD": frozenset(read_roles),
        "OPTIONS": frozenset(read_roles),
        "POST": frozenset(post_roles),
        "PUT": frozenset(put_roles),
        "PATCH": frozenset(patch_roles),
        "DELETE": frozenset(delete_roles),
    }


DEFAULT_RESOURCE_ROLE_MATRICES = {
    "users": build_role_matrix(
        read_roles=ADMIN_ROLES,
        post_roles=ADMIN_ROLES,
        put_roles=ADMIN_ROLES,
        patch_roles=ADMIN_ROLES,
    ),
    "clients": build_role_matrix(),
    "products": build_role_matrix(
        read_roles=ALL_ROLES,
        post_roles=ADMIN_ROLES,
        put_roles=ADMIN_ROLES,
        patch_roles=ADMIN_ROLES,
    ),
    "intermediaries": build_role_matrix(
        post_roles=ADMIN_ROLES,
        put_roles=ADMIN_ROLES,
        patch_roles=ADMIN_ROLES,
    ),
    "quotes": build_role_matrix(),
    "policies": build_role_matrix(read_roles=ALL_ROLES),
    "claims": build_role_matrix(
        read_roles=ALL_ROLES,
        post_roles=frozenset((ROLE_ADMIN, ROLE_AGENT, ROLE_CLIENT, ROLE_CLAIMS)),
        put_roles=CLAIMS_ROLES,
        patch_roles=CLAIMS_ROLES,
    ),
    "payments": build_role_matrix(
        read_roles=FINANCE_ROLES | {ROLE_AGENT},
        post_roles=FINANCE_ROLES,
        put_roles=FINANCE_ROLES,
        patch_roles=FINANCE_ROLES,
    ),
    "commissions": build_role_matrix(
        read_roles=FINANCE_ROLES,
        post_roles=FINANCE_ROLES,
        put_roles=FINANCE_ROLES,
        patch_roles=FINANCE_ROLES,
    ),
    "reminders": build_role_matrix(),
    "ledger": build_role_matrix(
        read_roles=ADMIN_ROLES,
        post_roles=NO_ROLES,
        put_roles=NO_ROLES,
        patch_roles=NO_ROLES,
        delete_roles=NO_ROLES,
    ),
}

DEFAULT_ROLE_MATRIX = build_role_matrix()
KNOWN_RESOURCES = frozenset(DEFAULT_RESOURCE_ROLE_MATRICES.keys())


def _normalize_roles(raw_roles: Iterable[str]) -> frozenset[str]:
    if not isinstance(raw_roles, (list, tuple, set, frozenset)):
        return frozenset()
    normalized = {str(role).lower() for role in raw_roles}
    return frozenset(role for role in normalized if role in VALID_ROLES)


def validate_role_overrides(overrides) -> None:
    if overrides in (None, {}):
        return

    if not isinstance(overrides, dict):
        raise ValidationError("Role overrides must be a JSON object (dictionary).")

    errors = {}
    for resource_key, method_map in overrides.items():
        resource_name = str(resource_key)
        resource_errors = []

        if resource_name not in KNOWN_RESOURCES:
            resource_errors.append(
                f"Unknown resource '{resource_name}'. Allowed: {sorted(KNOWN_RESOURCES)}"
            )

        if not isinstance(method_map, dict):
            resource_errors.append("Resource value must be an object of HTTP methods to role lists.")
            errors[resource_name] = resource_errors
            continue

        for method, raw_roles in method_map.items():
            method_name = str(method).upper()
            if method_name not in VALID_METHODS:
                resource_errors.append(
                    f"Method '{method_name}' is invalid. Allowed: {sorted(VALID_METHODS)}"
                )
                continue
            if not isinstance(raw_roles, list) or not raw_roles:
                resource_errors.append(f"Method '{method_name}' must contain a non-empty role list.")
                continue
            if len(_normalize_roles(raw_roles)) != len({str(r).lower() for r in raw_roles}):
                resource_errors.append(
                    f"Method '{method_name}' contains invalid roles. Allowed roles: {sorted(VALID_ROLES)}"
                )

        if resource_errors:
            errors[resource_name] = resource_errors

    if errors:
        raise ValidationError(errors)


def get_resource_role_matrices() -> dict:
    matrices = deepcopy(DEFAULT_RESOURCE_ROLE_MATRICES)
    overrides = getattr(settings, "RESOURCE_ROLE_OVERRIDES", {})
    try:
        validate_role_overrides(overrides)
    except ValidationError as exc:
        logger.warning("Ignoring invalid RESOURCE_ROLE_OVERRIDES: %s", exc.messages)
        return matrices

    for resource_key, method_map in (overrides or {}).items():
        resource_matrix = matrices.setdefault(str(resource_key), {})
        for method, raw_roles in method_map.items():
            resource_matrix[str(method).upper()] = _normalize_roles(raw_roles)
    return matrices


def get_role_matrix_for_resource(resource_key: str) -> dict:
    return get_resource_role_matrices().get(resource_key, DEFAULT_ROLE_MATRIX)


def role_can(role_matrix, role, method):
    allowed_roles = role_matrix.get(method, role_matrix.get("*", frozenset()))
    return role in allowed_roles


def capabilities_for_role(role) -> dict:
    capabilities = {}
    for resource_name, role_matrix in get_resource_role_matrices().items():
        capabilities[resource_name] = {
            "read": role_can(role_matrix, role, "GET"),
            "create": role_can(role_matrix, role, "POST"),
            "update": role_can(role_matrix, role, "PUT") or role_can(role_matrix, role, "PATCH"),
            "delete": role_can(role_matrix, role, "DELETE"),
        }
    return capabilities
