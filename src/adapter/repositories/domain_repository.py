from typing import Dict, List, Optional

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.domain_repository import IDomainRepository
from src.domain.entities import Domain


class DomainRepository(IDomainRepository):
    """Domain repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_domain(self, domain: str) -> Optional[Domain]:
        """Get binding by hostname"""
        stmt = select(Domain).where(Domain.domain == domain)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_current_for_tenant(self, tenant_id: str) -> Optional[Domain]:
        """Get the tenant's current (first) binding"""
        stmt = (
            select(Domain)
            .where(Domain.tenant_id == tenant_id)
            .order_by(Domain.created_at)
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def get_current_for_tenants(self, tenant_ids: List[str]) -> Dict[str, str]:
        """Map tenant id -> current hostname for the given tenants"""
        if not tenant_ids:
            return {}
        stmt = (
            select(Domain)
            .where(Domain.tenant_id.in_(tenant_ids))
            .order_by(Domain.created_at.desc())
        )
        result = await self.session.exec(stmt)
        # oldest binding wins, so later rows overwrite newer ones
        return {d.tenant_id: d.domain for d in result.all()}

    async def create(self, domain: Domain) -> Domain:
        """Create a new binding"""
        self.session.add(domain)
        await self.session.flush()
        await self.session.refresh(domain)
        return domain

    async def delete_for_tenant(self, tenant_id: str, domain: Optional[str] = None) -> int:
        """Delete the tenant's bindings (only `domain` when given)"""
        stmt = delete(Domain).where(Domain.tenant_id == tenant_id)
        if domain is not None:
            stmt = stmt.where(Domain.domain == domain)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
