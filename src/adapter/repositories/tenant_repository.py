from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.tenant_repository import ITenantRepository
from src.domain.base import utcnow
from src.domain.entities import Tenant, TenantStatus


class TenantRepository(ITenantRepository):
    """Tenant repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        """Get tenant by ID"""
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list(
        self, status: Optional[TenantStatus] = None, limit: int = 50, offset: int = 0
    ) -> List[Tenant]:
        """List tenants, newest first"""
        stmt = select(Tenant)
        if status is not None:
            stmt = stmt.where(Tenant.status == status)
        stmt = stmt.order_by(Tenant.created_at.desc(), Tenant.id).offset(offset).limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant

    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        tenant.updated_at = utcnow()
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant

    async def delete(self, tenant: Tenant) -> None:
        """Delete tenant record"""
        await self.session.delete(tenant)
        await self.session.flush()
