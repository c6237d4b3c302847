"""List Tenants Use Case"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TenantStatus

from .dtos import TenantListResponse, TenantResponse

MAX_LIMIT = 100


class ListTenantsUseCase:
    """List tenants newest first, each with its current domain"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, status: Optional[TenantStatus] = None, limit: int = 50, offset: int = 0
    ) -> Result[TenantListResponse]:
        if limit < 1 or limit > MAX_LIMIT:
            return Return.err(
                Error("INVALID_LIMIT", f"Limit must be between 1 and {MAX_LIMIT}")
            )
        if offset < 0:
            return Return.err(Error("INVALID_OFFSET", "Offset must not be negative"))

        async with self.uow:
            tenants = await self.uow.tenants.list(status=status, limit=limit, offset=offset)
            domains = await self.uow.domains.get_current_for_tenants([t.id for t in tenants])

            return Return.ok(
                TenantListResponse(
                    tenants=[TenantResponse.from_entity(t, domains.get(t.id)) for t in tenants],
                    limit=limit,
                    offset=offset,
                )
            )
