"""
permissions.py

Role-based access control for the front desk: HTML views, API endpoints
and the Django admin.
"""

from django.contrib import admin
from django.contrib.auth.mixins import AccessMixin
from rest_framework.permissions import BasePermission

from .roles import ADMIN_ROLES, CUSTOMER_ROLES, STAFF_ROLES, Principal, Role


def principal_of(request):
    principal = getattr(request, "principal", None)
    if principal is None:
        principal = Principal.from_user(getattr(request, "user", None))
    return principal


class RoleRequiredMixin(AccessMixin):
    """
    Anonymous callers are sent to the login page; signed-in callers without
    one of ``allowed_roles`` get 403.
    """

    allowed_roles = STAFF_ROLES

    def dispatch(self, request, *args, **kwargs):
        # handle_no_permission() redirects anonymous users and raises 403 otherwise
        if not principal_of(request).has_any_role(self.allowed_roles):
            return self.handle_no_permission()
        return super().dispatch(request, *args, **kwargs)


class AdminRequiredMixin(RoleRequiredMixin):
    allowed_roles = ADMIN_ROLES


class StaffRequiredMixin(RoleRequiredMixin):
    allowed_roles = STAFF_ROLES


class CustomerRequiredMixin(RoleRequiredMixin):
    allowed_roles = CUSTOMER_ROLES


class HasFrontDeskRole(BasePermission):
    """API access for front-of-house roles (admin, manager, receptionist, staff)."""

    message = "Your role does not allow access to this resource."

    def has_permission(self, request, view):
        allowed = getattr(view, "allowed_roles", STAFF_ROLES)
        # DRF has already authenticated request.user at this point
        return Principal.from_user(request.user).has_any_role(allowed)


class RoleRestrictedAdmin(admin.ModelAdmin):
    """
    A base admin class that enforces role-based view, add, change, and delete permissions.
    Admins can do everything; managers can do everything except delete.
    """

    def _roles(self, request):
        return principal_of(request).roles

    def has_module_permission(self, request):
        return bool(self._roles(request) & {Role.ADMIN, Role.MANAGER})

    def has_view_permission(self, request, obj=None):
        return bool(self._roles(request) & {Role.ADMIN, Role.MANAGER})

    def has_add_permission(self, request):
        return bool(self._roles(request) & {Role.ADMIN, Role.MANAGER})

    def has_change_permission(self, request, obj=None):
        return bool(self._roles(request) & {Role.ADMIN, Role.MANAGER})

    def has_delete_permission(self, request, obj=None):
        return Role.ADMIN in self._roles(request)
