"""
Use Case: Delete Tenant

Removes the tenant's domain bindings and record, then drops its database.
"""

import logging
from typing import TYPE_CHECKING

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.domain.exceptions import TenancyError

from .dtos import DeleteTenantResponse

if TYPE_CHECKING:
    from src.app.services.provisioning import TenantProvisioner

logger = logging.getLogger(__name__)


class DeleteTenantUseCase:
    """
    Delete a tenant.

    Business Logic:
    1. Load tenant (TENANT_NOT_FOUND if missing)
    2. Delete its domain bindings and the tenant record
    3. Record tenant_deleted audit event and commit
    4. Drop the tenant database (TENANT_DEPROVISIONING_FAILED on error)
    """

    def __init__(self, uow: UnitOfWork, provisioner: "TenantProvisioner"):
        self.uow = uow
        self.provisioner = provisioner

    async def execute(self, tenant_id: str) -> Result[DeleteTenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            tenant_name = tenant.name
            domains_deleted = await self.uow.domains.delete_for_tenant(tenant_id)
            await self.uow.tenants.delete(tenant)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    action="tenant_deleted",
                    event_metadata={"name": tenant_name, "domains_deleted": domains_deleted},
                )
            )
            await self.uow.commit()

        try:
            await self.provisioner.deprovision(tenant_id)
        except TenancyError as e:
            logger.error(f"Database of deleted tenant {tenant_id} could not be dropped: {e}")
            return Return.err(
                Error(
                    "TENANT_DEPROVISIONING_FAILED",
                    "Tenant deleted but its database could not be dropped",
                    reason=str(e),
                )
            )

        return Return.ok(
            DeleteTenantResponse(tenant_id=tenant_id, domains_deleted=domains_deleted)
        )
