"""
Sync User Roles Use Case

Replaces a tenant user's roles.
"""

from typing import List
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.entities import TenantUser

from .dtos import TenantUserResponse


class SyncUserRolesUseCase:
    """
    Business Rules:
    - Unknown user -> USER_NOT_FOUND
    - Unknown role -> ROLE_NOT_FOUND, nothing changed
    - The user ends up holding exactly the given roles
    """

    def __init__(self, uow: TenantUnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, role_names: List[str]) -> Result[TenantUserResponse]:
        role_names = list(dict.fromkeys(role_names))

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            roles = await self.uow.roles.get_by_names(role_names, TenantUser.guard_name)
            missing = sorted(set(role_names) - {role.name for role in roles})
            if missing:
                return Return.err(
                    Error("ROLE_NOT_FOUND", f"Unknown role(s): {', '.join(missing)}")
                )

            await self.uow.roles.sync_user_roles(user.id, roles)
            user = await self.uow.users.update(user)
            await self.uow.commit()

            return Return.ok(
                TenantUserResponse(
                    id=str(user.id),
                    name=user.name,
                    email=user.email,
                    roles=sorted(role.name for role in roles),
                    created_at=user.created_at.isoformat() + "Z",
                )
            )
