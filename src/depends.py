from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.cache import build_cache
from src.adapter.services.job_queue import AsyncJobQueue, build_job_queue
from src.adapter.services.tenancy import build_tenancy
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.cache import Cache
from src.app.services.job_queue import JobQueue
from src.app.services.permission_registrar import PermissionRegistrar
from src.app.services.permission_registry import PermissionRegistry
from src.app.services.provisioning import TenantProvisioner
from src.app.services.tenancy import Tenancy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CENTRAL_TABLES

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


@asynccontextmanager
async def central_unit_of_work() -> AsyncIterator[UnitOfWork]:
    """Central UnitOfWork outside of a request (background jobs)"""
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


cache = build_cache(ApplicationConfig)
tenancy = build_tenancy(ApplicationConfig, engine)
job_queue: AsyncJobQueue = build_job_queue(ApplicationConfig, cache)
permission_registry = PermissionRegistry.from_config(ApplicationConfig)
permission_registrar = PermissionRegistrar(
    cache,
    guard_name=ApplicationConfig.TENANT_GUARD,
    ttl=ApplicationConfig.PERMISSION_CACHE_TTL,
)
provisioner = TenantProvisioner(
    tenancy,
    job_queue,
    permission_registry,
    permission_registrar,
    central_unit_of_work,
    guard_name=ApplicationConfig.TENANT_GUARD,
)

security = HTTPBearer(auto_error=False)


async def create_central_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(
            lambda sync_conn: SQLModel.metadata.create_all(sync_conn, tables=CENTRAL_TABLES)
        )


async def close_resources() -> None:
    await job_queue.close()
    await tenancy.close()
    await cache.close()
    await engine.dispose()


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_cache() -> Cache:
    return cache


def get_tenancy() -> Tenancy:
    return tenancy


def get_job_queue() -> JobQueue:
    return job_queue


def get_permission_registrar() -> PermissionRegistrar:
    return permission_registrar


def get_provisioner() -> TenantProvisioner:
    return provisioner


async def get_token_payload(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Returns:
        Decoded JWT payload containing user_id, tenant_id, roles, guard

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Bearer token required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials)
    if payload is None:
        raise ClientError(
            Error("INVALID_TOKEN", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if payload.get("guard") != ApplicationConfig.TENANT_GUARD:
        raise ClientError(
            Error("INVALID_TOKEN", "Token was not issued for the tenant panel"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload


def get_request_host(request: Request) -> str:
    return request.headers.get("host", "")
