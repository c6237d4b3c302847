"""
Database-per-tenant implementation of the tenancy contract.

Each tenant database is named `{prefix}{tenant_id}` and reached through
TENANT_DB_URI_TEMPLATE with `{database}` substituted. Creating and dropping
databases is delegated to a dialect-specific manager.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Optional

from sqlalchemy import make_url, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyTenantUnitOfWork
from src.app.services.tenancy import Tenancy, tenant_context
from src.domain.entities import TENANT_TABLES
from src.domain.exceptions import TenancyError

logger = logging.getLogger(__name__)

_SAFE_TENANT_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class DatabaseManager(ABC):
    """Creates and drops tenant databases for one SQL dialect"""

    @abstractmethod
    async def exists(self, database: str, uri: str) -> bool:
        pass

    @abstractmethod
    async def create(self, database: str, uri: str) -> None:
        pass

    @abstractmethod
    async def delete(self, database: str, uri: str) -> None:
        pass


class SQLiteDatabaseManager(DatabaseManager):
    """One SQLite file per tenant"""

    @staticmethod
    def _path(uri: str) -> Path:
        return Path(make_url(uri).database)

    async def exists(self, database: str, uri: str) -> bool:
        return self._path(uri).exists()

    async def create(self, database: str, uri: str) -> None:
        path = self._path(uri)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=False)

    async def delete(self, database: str, uri: str) -> None:
        self._path(uri).unlink(missing_ok=True)


class PostgreSQLDatabaseManager(DatabaseManager):
    """CREATE/DROP DATABASE through the central server connection"""

    def __init__(self, server_engine: AsyncEngine):
        self.server_engine = server_engine

    async def exists(self, database: str, uri: str) -> bool:
        async with self.server_engine.connect() as conn:
            result = await conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"), {"name": database}
            )
            return result.scalar() is not None

    async def create(self, database: str, uri: str) -> None:
        async with self.server_engine.connect() as conn:
            conn = await conn.execution_options(isolation_level="AUTOCOMMIT")
            await conn.execute(text(f'CREATE DATABASE "{database}"'))

    async def delete(self, database: str, uri: str) -> None:
        async with self.server_engine.connect() as conn:
            conn = await conn.execution_options(isolation_level="AUTOCOMMIT")
            await conn.execute(text(f'DROP DATABASE IF EXISTS "{database}"'))


class DatabaseTenancy(Tenancy):
    """Tenancy backed by one database per tenant"""

    def __init__(
        self,
        uri_template: str,
        prefix: str = "tenant",
        server_engine: Optional[AsyncEngine] = None,
        manager: Optional[DatabaseManager] = None,
    ):
        self.uri_template = uri_template
        self.prefix = prefix
        self.manager = manager or self._manager_for(uri_template, server_engine)
        self._engines: Dict[str, AsyncEngine] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _manager_for(uri_template: str, server_engine: Optional[AsyncEngine]) -> DatabaseManager:
        backend = make_url(uri_template.format(database="template")).get_backend_name()
        if backend == "sqlite":
            return SQLiteDatabaseManager()
        if backend == "postgresql":
            if server_engine is None:
                raise ValueError("PostgreSQL tenancy needs the central server engine")
            return PostgreSQLDatabaseManager(server_engine)
        raise ValueError(f"Unsupported tenant database backend: {backend}")

    def database_name(self, tenant_id: str) -> str:
        if not _SAFE_TENANT_ID.match(tenant_id):
            raise TenancyError(tenant_id, "tenant id is not usable as a database name")
        return f"{self.prefix}{tenant_id}"

    def database_uri(self, tenant_id: str) -> str:
        return self.uri_template.format(database=self.database_name(tenant_id))

    async def _engine(self, tenant_id: str) -> AsyncEngine:
        engine = self._engines.get(tenant_id)
        if engine is None:
            async with self._lock:
                engine = self._engines.get(tenant_id)
                if engine is None:
                    engine = create_async_engine(self.database_uri(tenant_id), future=True)
                    self._engines[tenant_id] = engine
        return engine

    async def database_exists(self, tenant_id: str) -> bool:
        return await self.manager.exists(
            self.database_name(tenant_id), self.database_uri(tenant_id)
        )

    async def create_database(self, tenant_id: str) -> None:
        if await self.database_exists(tenant_id):
            raise TenancyError(tenant_id, "tenant database already exists")
        await self.manager.create(self.database_name(tenant_id), self.database_uri(tenant_id))
        logger.info(f"Created database {self.database_name(tenant_id)}")

    async def migrate_database(self, tenant_id: str) -> None:
        if not await self.database_exists(tenant_id):
            raise TenancyError(tenant_id, "tenant database does not exist")
        engine = await self._engine(tenant_id)
        async with engine.begin() as conn:
            await conn.run_sync(
                lambda sync_conn: SQLModel.metadata.create_all(sync_conn, tables=TENANT_TABLES)
            )
        logger.info(f"Migrated database {self.database_name(tenant_id)}")

    async def delete_database(self, tenant_id: str) -> None:
        engine = self._engines.pop(tenant_id, None)
        if engine is not None:
            await engine.dispose()
        await self.manager.delete(self.database_name(tenant_id), self.database_uri(tenant_id))
        logger.info(f"Deleted database {self.database_name(tenant_id)}")

    @asynccontextmanager
    async def run(self, tenant_id: str) -> AsyncIterator[SqlAlchemyTenantUnitOfWork]:
        if not await self.database_exists(tenant_id):
            raise TenancyError(tenant_id, "tenant database does not exist")
        engine = await self._engine(tenant_id)

        with tenant_context(tenant_id):
            async with AsyncSession(engine, expire_on_commit=False, autoflush=False) as session:
                yield SqlAlchemyTenantUnitOfWork(session, tenant_id)

    async def close(self) -> None:
        engines, self._engines = self._engines, {}
        for engine in engines.values():
            await engine.dispose()


def build_tenancy(config, central_engine: AsyncEngine) -> DatabaseTenancy:
    """Create the tenancy selected by TENANT_DB_URI_TEMPLATE"""
    return DatabaseTenancy(
        uri_template=config.TENANT_DB_URI_TEMPLATE,
        prefix=config.TENANT_DB_PREFIX,
        server_engine=central_engine,
    )
