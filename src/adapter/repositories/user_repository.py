from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import ITenantUserRepository
from src.domain.base import utcnow
from src.domain.entities import TenantUser


class TenantUserRepository(ITenantUserRepository):
    """Tenant user repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[TenantUser]:
        """Get user by ID"""
        stmt = select(TenantUser).where(TenantUser.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email(self, email: str) -> Optional[TenantUser]:
        """Get user by email address"""
        stmt = select(TenantUser).where(TenantUser.email == email.lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_all(self) -> List[TenantUser]:
        """List all users of the tenant"""
        stmt = select(TenantUser).order_by(TenantUser.created_at, TenantUser.email)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, user: TenantUser) -> TenantUser:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: TenantUser) -> TenantUser:
        """Update existing user"""
        user.updated_at = utcnow()
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user
