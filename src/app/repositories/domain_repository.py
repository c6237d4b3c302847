from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from src.domain.entities import Domain


class IDomainRepository(ABC):
    """Domain repository interface - application layer"""

    @abstractmethod
    async def get_by_domain(self, domain: str) -> Optional[Domain]:
        """Get binding by hostname"""
        pass

    @abstractmethod
    async def get_current_for_tenant(self, tenant_id: str) -> Optional[Domain]:
        """Get the tenant's current (first) binding"""
        pass

    @abstractmethod
    async def get_current_for_tenants(self, tenant_ids: List[str]) -> Dict[str, str]:
        """Map tenant id -> current hostname for the given tenants"""
        pass

    @abstractmethod
    async def create(self, domain: Domain) -> Domain:
        """Create a new binding"""
        pass

    @abstractmethod
    async def delete_for_tenant(self, tenant_id: str, domain: Optional[str] = None) -> int:
        """Delete the tenant's bindings (only `domain` when given); returns rows deleted"""
        pass
