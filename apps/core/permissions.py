"""
Permission classes for role-based access control.
"""

from rest_framework import permissions


class HasRole(permissions.BasePermission):
    """
    Base permission that admits authenticated users whose role is listed in
    ``allowed_roles``.
    """

    allowed_roles = ()
    message = "Your role does not allow this action."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return getattr(user, "role", None) in self.allowed_roles


class IsAdmin(HasRole):
    """Only administrators."""

    allowed_roles = ("ADMIN",)
    message = "Access denied. Only administrators can perform this action."


class IsAdminOrManager(HasRole):
    """Administrators and store managers."""

    allowed_roles = ("ADMIN", "MANAGER")
    message = "Access denied. Only administrators and managers can perform this action."


class CanProcessSales(HasRole):
    """Any store role may run a checkout."""

    allowed_roles = ("ADMIN", "MANAGER", "CASHIER")
    message = "Access denied. Your account cannot process sales."
