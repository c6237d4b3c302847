from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import Tenant, TenantStatus


class ITenantRepository(ABC):
    """Tenant repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        """Get tenant by ID"""
        pass

    @abstractmethod
    async def list(
        self, status: Optional[TenantStatus] = None, limit: int = 50, offset: int = 0
    ) -> List[Tenant]:
        """List tenants, newest first"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        pass

    @abstractmethod
    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        pass

    @abstractmethod
    async def delete(self, tenant: Tenant) -> None:
        """Delete tenant record"""
        pass
