"""
frontdesk/roles.py
Role resolution for the signed-in caller.

Roles come from ``CustomUser.Roles``; a superuser always counts as ADMIN.
The landing page of a caller is decided by the first matching entry of
``ROLE_PRIORITY``.
"""

from dataclasses import dataclass, field

from .models import CustomUser

Role = CustomUser.Roles

# ==============================================================================
# ROLE GROUPS
# ==============================================================================

ADMIN_ROLES = frozenset({Role.ADMIN})
STAFF_ROLES = frozenset({Role.ADMIN, Role.MANAGER, Role.RECEPTIONIST, Role.STAFF})
CUSTOMER_ROLES = frozenset({Role.CUSTOMER, Role.ADMIN})

# Ordered: the first role the caller holds wins.
ROLE_PRIORITY = (
    (Role.ADMIN, "frontdesk:admin-dashboard"),
    (Role.MANAGER, "frontdesk:staff-dashboard"),
    (Role.RECEPTIONIST, "frontdesk:staff-dashboard"),
    (Role.STAFF, "frontdesk:staff-dashboard"),
    (Role.CUSTOMER, "frontdesk:customer-dashboard"),
)
FALLBACK_LANDING = "frontdesk:home"


# ==============================================================================
# PRINCIPAL
# ==============================================================================

@dataclass(frozen=True)
class Principal:
    user_id: int | None = None
    username: str = ""
    roles: frozenset = field(default_factory=frozenset)

    @classmethod
    def anonymous(cls):
        return cls()

    @classmethod
    def from_user(cls, user):
        if user is None or not user.is_authenticated:
            return cls.anonymous()
        return cls(user_id=user.pk, username=user.get_username(), roles=roles_for(user))

    @property
    def is_authenticated(self):
        return self.user_id is not None

    def has_role(self, role):
        return role in self.roles

    def has_any_role(self, allowed):
        return bool(self.roles & frozenset(allowed))

    # Template helpers
    @property
    def is_admin(self):
        return self.has_any_role(ADMIN_ROLES)

    @property
    def is_front_of_house(self):
        return self.has_any_role(STAFF_ROLES)

    @property
    def is_customer(self):
        return self.has_any_role(CUSTOMER_ROLES)

    @property
    def landing_url_name(self):
        return landing_url_name(self.roles)


def roles_for(user):
    roles = set()
    if user.role in Role.values:
        roles.add(Role(user.role))
    if user.is_superuser:
        roles.add(Role.ADMIN)
    return frozenset(roles)


def landing_url_name(roles):
    for role, url_name in ROLE_PRIORITY:
        if role in roles:
            return url_name
    return FALLBACK_LANDING
