"""User account model."""

from dataclasses import dataclass, field

from loan_ledger.models.enums import Permission, UserRole, UserStatus


@dataclass
class User:
    """Platform user."""

    user_id: str
    name: str
    role: UserRole
    status: UserStatus = UserStatus.ACTIVE
    office_id: str | None = None
    managed_by: str | None = None
    permissions: frozenset[Permission] = field(default_factory=frozenset)
