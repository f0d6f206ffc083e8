from rest_framework.permissions import BasePermission

from accounts.rbac import DEFAULT_ROLE_MATRIX, ROLE_ADMIN, get_role_matrix_for_resource


class HasResourceRole(BasePermission):
    """Role-matrix check keyed by ``view.resource_key``.

    Views may narrow individual viewset actions with ``action_roles``
    (``{"approve": {"admin", "claims"}}``); those take precedence over the
    HTTP method matrix.
    """

    message = "User role is not allowed for this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser or getattr(user, "role", "") == ROLE_ADMIN:
            return True

        role = getattr(user, "role", "")
        action_roles = getattr(view, "action_roles", None) or {}
        action = getattr(view, "action", None)
        if action in action_roles:
            return role in action_roles[action]

        resource_key = getattr(view, "resource_key", None)
        role_matrix = (
            get_role_matrix_for_resource(resource_key) if resource_key else DEFAULT_ROLE_MATRIX
        )
        allowed_roles = role_matrix.get(request.method, role_matrix.get("*", frozenset()))
        return role in allowed_roles


class IsAdminRole(BasePermission):
    message = "Only administrators can perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and (user.is_superuser or getattr(user, "role", "") == ROLE_ADMIN)
        )
