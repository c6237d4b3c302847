"""
Authorize Tenant User Use Case

Resolves the panel user behind a token and checks one permission.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.permission_registrar import PermissionRegistrar
from src.app.services.unit_of_work import TenantUnitOfWork

from .dtos import PanelUser


class AuthorizeTenantUserUseCase:
    """
    Business Rules:
    - User must still exist in the tenant database (USER_NOT_FOUND)
    - Effective permissions are the union over the user's roles, read
      through the permission cache
    - Missing permission -> PERMISSION_DENIED
    """

    def __init__(self, uow: TenantUnitOfWork, registrar: PermissionRegistrar):
        self.uow = uow
        self.registrar = registrar

    async def execute(self, user_id: UUID, permission: Optional[str] = None) -> Result[PanelUser]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User no longer exists"))

            permissions = await self.registrar.get_permissions_for_user(
                self.uow, self.uow.tenant_id, user
            )
            if permission is not None and permission not in permissions:
                return Return.err(
                    Error("PERMISSION_DENIED", f"Missing permission: {permission}")
                )

            return Return.ok(
                PanelUser(
                    id=str(user.id),
                    email=user.email,
                    tenant_id=self.uow.tenant_id,
                    permissions=sorted(permissions),
                    checked_permission=permission,
                )
            )
