"""
Seed Tenant Permissions Job

Unique per tenant: while one run for a tenant is pending or running,
further dispatches for it are dropped by the queue.
"""

import logging
from typing import Any, AsyncContextManager, Callable, Dict, Optional

from src.app.services.job_queue import Job
from src.app.services.permission_registrar import PermissionRegistrar
from src.app.services.permission_registry import PermissionRegistry
from src.app.services.tenancy import Tenancy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tenants.assign_admin_role_use_case import AssignAdminRoleUseCase
from src.app.use_cases.tenants.seed_permissions_use_case import SeedTenantPermissionsUseCase
from src.domain.entities import AuditEvent
from src.domain.exceptions import SeedingFailedError

logger = logging.getLogger(__name__)


class SeedTenantPermissionsJob(Job):
    """
    Seed the tenant's permission baseline, then grant super_admin to the
    tenant's initial admin user if that user already exists.

    Every step is idempotent, so a retry re-runs the whole sequence.
    """

    def __init__(
        self,
        tenant_id: str,
        admin_email: Optional[str],
        tenancy: Tenancy,
        registry: PermissionRegistry,
        registrar: PermissionRegistrar,
        central_uow_factory: Callable[[], AsyncContextManager[UnitOfWork]],
        guard_name: str = "tenant",
    ):
        self.tenant_id = tenant_id
        self.admin_email = admin_email
        self.tenancy = tenancy
        self.registry = registry
        self.registrar = registrar
        self.central_uow_factory = central_uow_factory
        self.guard_name = guard_name

    def unique_id(self) -> Optional[str]:
        return self.tenant_id

    def payload(self) -> Dict[str, Any]:
        return {"tenant_id": self.tenant_id, "admin_email": self.admin_email}

    def metadata(self) -> Dict[str, Any]:
        return {"tenant_id": self.tenant_id}

    async def handle(self) -> Dict[str, Any]:
        async with self.tenancy.run(self.tenant_id) as tenant_uow:
            seed_result = await SeedTenantPermissionsUseCase(
                tenant_uow, self.registry, self.registrar, self.guard_name
            ).execute()
            if seed_result.is_err():
                error = seed_result.error
                raise SeedingFailedError(self.tenant_id, error.code, error.message)
            outcome = seed_result.value

            admin_role_assigned = False
            if self.admin_email:
                assign_result = await AssignAdminRoleUseCase(tenant_uow).execute_for_email(
                    self.admin_email
                )
                admin_role_assigned = assign_result.value.assigned

        async with self.central_uow_factory() as uow:
            async with uow:
                await uow.audit_events.create(
                    AuditEvent(
                        tenant_id=self.tenant_id,
                        action="tenant_permissions_seeded",
                        event_metadata={
                            "mode": outcome.mode.value,
                            "permission_count": outcome.permission_count,
                            "admin_role_assigned": admin_role_assigned,
                        },
                    )
                )
                await uow.commit()

        return {
            "mode": outcome.mode.value,
            "permission_count": outcome.permission_count,
            "admin_role_assigned": admin_role_assigned,
        }
