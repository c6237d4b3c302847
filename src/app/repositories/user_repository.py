from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import TenantUser


class ITenantUserRepository(ABC):
    """Tenant user repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[TenantUser]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[TenantUser]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def list_all(self) -> List[TenantUser]:
        """List all users of the tenant"""
        pass

    @abstractmethod
    async def create(self, user: TenantUser) -> TenantUser:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: TenantUser) -> TenantUser:
        """Update existing user"""
        pass
