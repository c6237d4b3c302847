"""
Seed Tenant Permissions Use Case

Writes the tenant's permission/role baseline: every permission of the
registry plus a super_admin role holding exactly that set. If the full
set cannot be produced, a minimal user-management baseline is written
instead so the tenant's admin can still reach the panel.
"""

import logging
from typing import List

from libs.result import Error, Result, Return
from src.app.services.permission_registrar import PermissionRegistrar
from src.app.services.permission_registry import PermissionRegistry
from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.entities import SeedingMode

from .dtos import SeedPermissionsResponse

logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = "super_admin"

FALLBACK_PERMISSIONS = (
    "view_any_user",
    "view_user",
    "create_user",
    "update_user",
    "delete_user",
)


class SeedTenantPermissionsUseCase:
    """
    Use case for seeding a tenant's permissions and super_admin role.

    Business Rules:
    - Runs against the tenant database (uow must be tenant-scoped)
    - Idempotent: permissions and roles are first-or-create, the role's
      permission set is replaced, never appended to
    - Full generation failure falls back to FALLBACK_PERMISSIONS
    - Fallback failure is reported as SEEDING_FAILED
    - Cached permission map of the tenant is forgotten before and after
    """

    def __init__(
        self,
        uow: TenantUnitOfWork,
        registry: PermissionRegistry,
        registrar: PermissionRegistrar,
        guard_name: str = "tenant",
    ):
        self.uow = uow
        self.registry = registry
        self.registrar = registrar
        self.guard_name = guard_name

    async def execute(self) -> Result[SeedPermissionsResponse]:
        tenant_id = self.uow.tenant_id
        await self.registrar.forget_cached_permissions(tenant_id)

        async with self.uow:
            try:
                names = self.registry.all_permission_names()
                await self._seed(names)
                await self.uow.commit()
                mode = SeedingMode.full
            except Exception as e:
                await self.uow.rollback()
                logger.warning(
                    f"Full permission generation failed for tenant {tenant_id}, "
                    f"using fallback baseline: {e}"
                )
                names = list(FALLBACK_PERMISSIONS)
                try:
                    await self._seed(names)
                    await self.uow.commit()
                    mode = SeedingMode.fallback
                except Exception as fallback_error:
                    await self.uow.rollback()
                    logger.error(
                        f"Fallback permission seeding failed for tenant {tenant_id}",
                        exc_info=True,
                    )
                    return Return.err(
                        Error(
                            "SEEDING_FAILED",
                            "Could not seed tenant permissions",
                            reason=str(fallback_error),
                        )
                    )

        await self.registrar.forget_cached_permissions(tenant_id)
        logger.info(f"Seeded {len(names)} permissions for tenant {tenant_id} ({mode.value})")

        return Return.ok(
            SeedPermissionsResponse(
                tenant_id=tenant_id,
                mode=mode,
                role=SUPER_ADMIN_ROLE,
                permission_count=len(names),
            )
        )

    async def _seed(self, names: List[str]) -> None:
        permissions = [
            await self.uow.permissions.first_or_create(name, self.guard_name) for name in names
        ]
        role = await self.uow.roles.first_or_create(SUPER_ADMIN_ROLE, self.guard_name)
        await self.uow.roles.sync_permissions(role, permissions)
