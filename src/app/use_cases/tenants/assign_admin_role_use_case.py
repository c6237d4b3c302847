"""
Assign Admin Role Use Case

Grants super_admin to a tenant user.
"""

import logging

from libs.result import Result, Return
from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.entities import RoleAssignable

from .dtos import AssignAdminRoleResponse
from .seed_permissions_use_case import SUPER_ADMIN_ROLE

logger = logging.getLogger(__name__)


class AssignAdminRoleUseCase:
    """
    Use case for granting the super_admin role.

    Business Rules:
    - Users that cannot hold roles are skipped (assigned=False)
    - Missing role is a no-op (assigned=False); seeding assigns it later
    - Already holding the role counts as assigned
    """

    def __init__(self, uow: TenantUnitOfWork):
        self.uow = uow

    async def execute(self, user: object) -> Result[AssignAdminRoleResponse]:
        async with self.uow:
            return Return.ok(await self._assign(user))

    async def execute_for_email(self, email: str) -> Result[AssignAdminRoleResponse]:
        """Grant the role to the user with this email, if present"""
        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is None:
                return Return.ok(AssignAdminRoleResponse(assigned=False))
            return Return.ok(await self._assign(user))

    async def _assign(self, user: object) -> AssignAdminRoleResponse:
        if not isinstance(user, RoleAssignable):
            logger.info(f"{type(user).__name__} cannot hold roles, skipping admin role")
            return AssignAdminRoleResponse(assigned=False)

        role = await self.uow.roles.get_by_name(SUPER_ADMIN_ROLE, user.guard_name)
        if role is None:
            logger.info(f"Role {SUPER_ADMIN_ROLE} not seeded yet for tenant {self.uow.tenant_id}")
            return AssignAdminRoleResponse(assigned=False)

        user_id = user.id
        added = await self.uow.roles.assign_to_user(user_id, role)
        await self.uow.commit()

        return AssignAdminRoleResponse(assigned=True, user_id=str(user_id), newly_assigned=added)
