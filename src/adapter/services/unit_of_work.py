from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.domain_repository import DomainRepository
from src.adapter.repositories.permission_repository import PermissionRepository
from src.adapter.repositories.role_repository import RoleRepository
from src.adapter.repositories.tenant_repository import TenantRepository
from src.adapter.repositories.user_repository import TenantUserRepository
from src.app.services.unit_of_work import TenantUnitOfWork, UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern (central database)"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.tenants = TenantRepository(self.session)
        self.domains = DomainRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


class SqlAlchemyTenantUnitOfWork(TenantUnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern (tenant database)"""

    def __init__(self, session: AsyncSession, tenant_id: str):
        self.session = session
        self.tenant_id = tenant_id

    async def __aenter__(self):
        self.users = TenantUserRepository(self.session)
        self.roles = RoleRepository(self.session)
        self.permissions = PermissionRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
