from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.cache import InMemoryCache
from src.adapter.services.job_queue import AsyncJobQueue
from src.adapter.services.tenancy import DatabaseTenancy
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.permission_registrar import PermissionRegistrar
from src.app.services.permission_registry import PermissionRegistry
from src.app.services.provisioning import TenantProvisioner
from src.depends import (
    get_job_queue,
    get_permission_registrar,
    get_provisioner,
    get_tenancy,
    get_unit_of_work,
)
from src.domain.entities import CENTRAL_TABLES

ADMIN_HEADERS = {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/central.db")
    async with engine.begin() as conn:
        await conn.run_sync(
            lambda sync_conn: SQLModel.metadata.create_all(sync_conn, tables=CENTRAL_TABLES)
        )
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def central_uow_factory(session_factory):
    @asynccontextmanager
    async def factory():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    return factory


@pytest_asyncio.fixture
async def tenancy(tmp_path):
    tenancy = DatabaseTenancy(f"sqlite+aiosqlite:///{tmp_path}/tenants/{{database}}.sqlite")
    yield tenancy
    await tenancy.close()


@pytest_asyncio.fixture
async def cache():
    return InMemoryCache()


@pytest_asyncio.fixture
async def job_queue(cache):
    return AsyncJobQueue(cache, mode="sync", default_tries=1, default_backoff=0)


@pytest_asyncio.fixture
async def registry():
    return PermissionRegistry.from_config(ApplicationConfig)


@pytest_asyncio.fixture
async def registrar(cache):
    return PermissionRegistrar(cache, ttl=60)


@pytest_asyncio.fixture
async def provisioner(tenancy, job_queue, registry, registrar, central_uow_factory):
    return TenantProvisioner(tenancy, job_queue, registry, registrar, central_uow_factory)


@pytest_asyncio.fixture
async def client(session_factory, tenancy, job_queue, registrar, provisioner):
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_tenancy] = lambda: tenancy
    app.dependency_overrides[get_job_queue] = lambda: job_queue
    app.dependency_overrides[get_permission_registrar] = lambda: registrar
    app.dependency_overrides[get_provisioner] = lambda: provisioner

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def create_tenant(client):
    """POST /admin/tenants with a valid form; returns the response body"""

    async def create(domain="acme.example.test", email="admin@acme.test", **extra):
        payload = {
            "domain": domain,
            "email": email,
            "password": "secret1",
            "password_confirmation": "secret1",
            "name": "Acme",
        }
        payload.update(extra)
        response = await client.post("/admin/tenants", json=payload, headers=ADMIN_HEADERS)
        assert response.status_code == 201, response.text
        return response.json()

    return create
