"""User account generator."""

from __future__ import annotations

from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models import User
from loan_ledger.models.enums import Permission, UserRole, UserStatus


class UserGenerator(BaseGenerator):
    """Generate synthetic platform users."""

    def generate(
        self,
        role: UserRole,
        office_id: str | None = None,
        status: UserStatus = UserStatus.ACTIVE,
        managed_by: str | None = None,
        permissions: frozenset[Permission] | None = None,
        user_id: str | None = None,
    ) -> User:
        """Generate a user.

        System administrators never carry an office.
        """
        if role == UserRole.SYSTEM_ADMIN:
            office_id = None
        return User(
            user_id=user_id or self._new_id(),
            name=self.fake.name(),
            role=role,
            status=status,
            office_id=office_id,
            managed_by=managed_by,
            permissions=permissions or frozenset(),
        )

    def generate_office_staff(
        self,
        office_id: str,
        num_employees: int = 2,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> list[User]:
        """Generate an office manager, an assistant and employees.

        The manager comes first so the list can be added to a store in order.
        """
        manager = self.generate(UserRole.OFFICE_MANAGER, office_id, status=status)
        staff = [
            manager,
            self.generate(
                UserRole.ASSISTANT_MANAGER,
                office_id,
                managed_by=manager.user_id,
                permissions=frozenset({Permission.MANAGE_REQUESTS, Permission.VIEW_REPORTS}),
            ),
        ]
        for _ in range(num_employees):
            staff.append(
                self.generate(
                    UserRole.EMPLOYEE,
                    office_id,
                    managed_by=manager.user_id,
                    permissions=frozenset({Permission.MANAGE_BORROWERS}),
                )
            )
        return staff
