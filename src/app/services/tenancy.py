"""
Tenancy contract.

A tenant owns an isolated database. `Tenancy.run` switches execution into
that database for the duration of an `async with` block and exposes the
tenant-scoped unit of work; the current tenant id is tracked in a
context variable so it survives awaits and stays isolated per task.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from typing import AsyncContextManager, Iterator, Optional

from src.app.services.unit_of_work import TenantUnitOfWork

_current_tenant_id: ContextVar[Optional[str]] = ContextVar("current_tenant_id", default=None)


def get_current_tenant_id() -> Optional[str]:
    """Tenant whose database is active in this context, if any"""
    return _current_tenant_id.get()


@contextmanager
def tenant_context(tenant_id: str) -> Iterator[str]:
    """Mark tenant_id as the active tenant until the block exits"""
    token = _current_tenant_id.set(tenant_id)
    try:
        yield tenant_id
    finally:
        _current_tenant_id.reset(token)


class Tenancy(ABC):
    """Tenant database lifecycle and context switching"""

    @abstractmethod
    def database_name(self, tenant_id: str) -> str:
        pass

    @abstractmethod
    async def database_exists(self, tenant_id: str) -> bool:
        pass

    @abstractmethod
    async def create_database(self, tenant_id: str) -> None:
        pass

    @abstractmethod
    async def migrate_database(self, tenant_id: str) -> None:
        pass

    @abstractmethod
    async def delete_database(self, tenant_id: str) -> None:
        pass

    @abstractmethod
    def run(self, tenant_id: str) -> AsyncContextManager[TenantUnitOfWork]:
        """Enter the tenant context; yields an un-entered TenantUnitOfWork"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Dispose every tenant engine"""
        pass
