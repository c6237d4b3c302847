"""
Validate Tenant Domain Use Case

Form-level uniqueness check run before create/edit.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .create_tenant_use_case import normalize_domain


class ValidateTenantDomainUseCase:
    """
    Business Rules:
    - Domain is required (DOMAIN_REQUIRED)
    - Domain must not be bound to another tenant (DOMAIN_ALREADY_EXISTS);
      on edit the tenant's own binding is ignored
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, domain: Optional[str], tenant_id: Optional[str] = None) -> Result[str]:
        domain_name = normalize_domain(domain)
        if not domain_name:
            return Return.err(Error("DOMAIN_REQUIRED", "Domain is required"))

        async with self.uow:
            existing = await self.uow.domains.get_by_domain(domain_name)
            if existing is not None and existing.tenant_id != tenant_id:
                return Return.err(
                    Error("DOMAIN_ALREADY_EXISTS", f"Domain {domain_name} is already taken")
                )

        return Return.ok(domain_name)
