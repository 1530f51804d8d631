from rest_framework import permissions

from .utils import is_authenticated


class RoleBasedPermission(permissions.BasePermission):
    def has_permission(self, request, view) -> bool:
        if not is_authenticated(request.user):
            return False

        required_perm = getattr(view, "required_permission", None)
        if not required_perm:
            return False

        return request.user.has_perm(required_perm)


class StaffWritePermission(permissions.BasePermission):
    """Anyone may read; writes need the view's ``required_permission``."""

    def has_permission(self, request, view) -> bool:
        if request.method in permissions.SAFE_METHODS:
            return True
        return RoleBasedPermission().has_permission(request, view)
