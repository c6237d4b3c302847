"""Get Tenant Use Case"""

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import TenantResponse


class GetTenantUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: str) -> Result[TenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            domain = await self.uow.domains.get_current_for_tenant(tenant_id)
            return Return.ok(TenantResponse.from_entity(tenant, domain.domain if domain else None))
