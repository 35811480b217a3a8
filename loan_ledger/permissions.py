"""Role capabilities.

Each role has a fixed set of capabilities it always holds and a set it may be
granted individually through ``User.permissions``. :func:`has_permission` is
the only check callers should use.
"""

from loan_ledger.models.enums import Permission, UserRole, UserStatus
from loan_ledger.models.user import User

ALL_PERMISSIONS = frozenset(Permission)

ROLE_CAPABILITIES: dict[UserRole, frozenset[Permission]] = {
    UserRole.SYSTEM_ADMIN: frozenset(
        {
            Permission.VIEW_REPORTS,
            Permission.USE_CALCULATOR,
            Permission.ACCESS_SETTINGS,
            Permission.MANAGE_EMPLOYEE_PERMISSIONS,
            Permission.VIEW_IDLE_FUNDS_REPORT,
        }
    ),
    UserRole.OFFICE_MANAGER: ALL_PERMISSIONS,
    UserRole.ASSISTANT_MANAGER: frozenset({Permission.USE_CALCULATOR}),
    UserRole.EMPLOYEE: frozenset({Permission.USE_CALCULATOR}),
    UserRole.INVESTOR: frozenset(),
}

GRANTABLE_CAPABILITIES: dict[UserRole, frozenset[Permission]] = {
    UserRole.SYSTEM_ADMIN: frozenset(),
    UserRole.OFFICE_MANAGER: frozenset(),
    UserRole.ASSISTANT_MANAGER: ALL_PERMISSIONS - {Permission.ALLOW_EMPLOYEE_LOAN_EDITS},
    UserRole.EMPLOYEE: frozenset(
        {
            Permission.MANAGE_INVESTORS,
            Permission.MANAGE_BORROWERS,
            Permission.IMPORT_DATA,
            Permission.ALLOW_EMPLOYEE_LOAN_EDITS,
        }
    ),
    UserRole.INVESTOR: frozenset(),
}


def has_permission(user: User, permission: Permission) -> bool:
    """Return whether ``user`` may exercise ``permission``."""
    if user.status != UserStatus.ACTIVE:
        return False
    try:
        role = UserRole(user.role)
    except ValueError:
        return False
    if permission in ROLE_CAPABILITIES[role]:
        return True
    return permission in GRANTABLE_CAPABILITIES[role] and permission in (user.permissions or ())


def capabilities(user: User) -> frozenset[Permission]:
    """Every permission ``user`` currently holds."""
    return frozenset(p for p in Permission if has_permission(user, p))


def has_full_visibility(role: UserRole) -> bool:
    """Only system administrators see records of every office."""
    return role == UserRole.SYSTEM_ADMIN