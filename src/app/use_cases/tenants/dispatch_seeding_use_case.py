"""
Dispatch Seeding Use Case

Operator-triggered re-run of the tenant's permission seeding.
"""

import logging
from typing import TYPE_CHECKING

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import DispatchSeedingResponse

if TYPE_CHECKING:
    from src.app.services.provisioning import TenantProvisioner

logger = logging.getLogger(__name__)


class DispatchSeedingUseCase:
    def __init__(self, uow: UnitOfWork, provisioner: "TenantProvisioner"):
        self.uow = uow
        self.provisioner = provisioner

    async def execute(self, tenant_id: str) -> Result[DispatchSeedingResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))
            admin_email = tenant.email

        if not await self.provisioner.tenancy.database_exists(tenant_id):
            return Return.err(
                Error("TENANT_DATABASE_MISSING", "Tenant database has not been provisioned")
            )

        job_id = await self.provisioner.dispatch_seeding(tenant_id, admin_email)
        return Return.ok(
            DispatchSeedingResponse(tenant_id=tenant_id, dispatched=job_id is not None, job_id=job_id)
        )
