"""
Identify Tenant Use Case

Resolves the tenant of a tenant panel request from its host.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TenantStatus

from .dtos import TenantResponse


def host_to_domain(host: Optional[str]) -> str:
    """Host header -> lower-case hostname without port"""
    host = (host or "").strip().lower()
    if host.startswith("["):
        return host.split("]", 1)[0] + "]"
    return host.split(":", 1)[0]


class IdentifyTenantUseCase:
    """
    Business Rules:
    - Unknown host -> TENANT_NOT_IDENTIFIED
    - Tenant must be active (TENANT_INACTIVE otherwise)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, host: Optional[str]) -> Result[TenantResponse]:
        domain_name = host_to_domain(host)

        async with self.uow:
            binding = await self.uow.domains.get_by_domain(domain_name) if domain_name else None
            if binding is None:
                return Return.err(
                    Error("TENANT_NOT_IDENTIFIED", f"No tenant is bound to {domain_name!r}")
                )

            tenant = await self.uow.tenants.get_by_id(binding.tenant_id)
            if tenant is None:
                return Return.err(
                    Error("TENANT_NOT_IDENTIFIED", f"No tenant is bound to {domain_name!r}")
                )
            if tenant.status != TenantStatus.active:
                return Return.err(Error("TENANT_INACTIVE", "Tenant is not active"))

            return Return.ok(TenantResponse.from_entity(tenant, binding.domain))
