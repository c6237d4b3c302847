from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.domain_repository import IDomainRepository
from src.app.repositories.permission_repository import IPermissionRepository
from src.app.repositories.role_repository import IRoleRepository
from src.app.repositories.tenant_repository import ITenantRepository
from src.app.repositories.user_repository import ITenantUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork for the central database"""

    # Repository properties (initialized in __aenter__)
    tenants: ITenantRepository
    domains: IDomainRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass


class TenantUnitOfWork(ABC):
    """Abstract UnitOfWork for one tenant's isolated database"""

    tenant_id: str

    users: ITenantUserRepository
    roles: IRoleRepository
    permissions: IPermissionRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
