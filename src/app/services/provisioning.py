"""
Tenant lifecycle pipeline.

Creation:  create database -> migrate database -> dispatch seeding job
Deletion:  delete database
"""

import logging
from typing import Any, AsyncContextManager, Callable, Dict, Optional

from src.app.jobs.seed_tenant_permissions import SeedTenantPermissionsJob
from src.app.services.job_queue import JobQueue
from src.app.services.permission_registrar import PermissionRegistrar
from src.app.services.permission_registry import PermissionRegistry
from src.app.services.tenancy import Tenancy
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class TenantProvisioner:
    def __init__(
        self,
        tenancy: Tenancy,
        queue: JobQueue,
        registry: PermissionRegistry,
        registrar: PermissionRegistrar,
        central_uow_factory: Callable[[], AsyncContextManager[UnitOfWork]],
        guard_name: str = "tenant",
    ):
        self.tenancy = tenancy
        self.queue = queue
        self.registry = registry
        self.registrar = registrar
        self.central_uow_factory = central_uow_factory
        self.guard_name = guard_name
        queue.register(SeedTenantPermissionsJob.job_name(), self.seeding_job)

    async def provision(self, tenant_id: str, admin_email: Optional[str] = None) -> Optional[str]:
        """
        Create and migrate the tenant database, then queue seeding.

        Raises TenancyError when a database step fails. Returns the seeding
        job id, or None when a seeding run for the tenant is already queued.
        """
        await self.tenancy.create_database(tenant_id)
        await self.tenancy.migrate_database(tenant_id)
        logger.info(f"Provisioned database for tenant {tenant_id}")
        return await self.dispatch_seeding(tenant_id, admin_email)

    async def dispatch_seeding(
        self, tenant_id: str, admin_email: Optional[str] = None
    ) -> Optional[str]:
        job = self.seeding_job({"tenant_id": tenant_id, "admin_email": admin_email})
        return await self.queue.dispatch(job)

    def seeding_job(self, payload: Dict[str, Any]) -> SeedTenantPermissionsJob:
        """Build the seeding job from its queued payload"""
        return SeedTenantPermissionsJob(
            tenant_id=payload["tenant_id"],
            admin_email=payload.get("admin_email"),
            tenancy=self.tenancy,
            registry=self.registry,
            registrar=self.registrar,
            central_uow_factory=self.central_uow_factory,
            guard_name=self.guard_name,
        )

    async def deprovision(self, tenant_id: str) -> None:
        """Drop the tenant database and its cached permissions"""
        if await self.tenancy.database_exists(tenant_id):
            await self.tenancy.delete_database(tenant_id)
            logger.info(f"Deleted database for tenant {tenant_id}")
        await self.registrar.forget_cached_permissions(tenant_id)
