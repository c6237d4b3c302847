"""
Unit tests for SeedTenantPermissionsUseCase

Full generation, fallback baseline and hard failure.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.permission_registry import PermissionRegistry
from src.app.use_cases.tenants import (
    FALLBACK_PERMISSIONS,
    SUPER_ADMIN_ROLE,
    SeedTenantPermissionsUseCase,
)
from src.domain.entities import Permission, Role, SeedingMode


@pytest.fixture
def registrar():
    registrar = MagicMock()
    registrar.forget_cached_permissions = AsyncMock()
    return registrar


@pytest.fixture
def tenant_db(mock_tenant_uow):
    mock_tenant_uow.permissions.first_or_create = AsyncMock(
        side_effect=lambda name, guard: Permission(name=name, guard_name=guard)
    )
    mock_tenant_uow.roles.first_or_create = AsyncMock(
        side_effect=lambda name, guard: Role(name=name, guard_name=guard)
    )
    mock_tenant_uow.roles.sync_permissions = AsyncMock()
    return mock_tenant_uow


def synced_names(tenant_db):
    role, permissions = tenant_db.roles.sync_permissions.call_args.args
    return role, [p.name for p in permissions]


@pytest.mark.asyncio
async def test_full_generation(tenant_db, registrar):
    registry = PermissionRegistry(resources={"user": None}, pages=["GeneralSettings"])

    result = await SeedTenantPermissionsUseCase(tenant_db, registry, registrar).execute()

    assert result.is_ok()
    assert result.value.mode == SeedingMode.full
    assert result.value.permission_count == 13

    role, names = synced_names(tenant_db)
    assert role.name == SUPER_ADMIN_ROLE
    assert role.guard_name == "tenant"
    assert names == registry.all_permission_names()
    tenant_db.commit.assert_awaited_once()
    registrar.forget_cached_permissions.assert_awaited_with("acme")


@pytest.mark.asyncio
async def test_invalid_registration_uses_fallback(tenant_db, registrar):
    registry = PermissionRegistry(resources={"user": None}, pages=["General Settings"])

    result = await SeedTenantPermissionsUseCase(tenant_db, registry, registrar).execute()

    assert result.is_ok()
    assert result.value.mode == SeedingMode.fallback
    assert result.value.permission_count == 5

    role, names = synced_names(tenant_db)
    assert role.name == SUPER_ADMIN_ROLE
    assert names == list(FALLBACK_PERMISSIONS)
    tenant_db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_write_failure_uses_fallback(tenant_db, registrar):
    calls = {"n": 0}

    async def flaky_sync(role, permissions):
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("constraint violation")

    tenant_db.roles.sync_permissions = AsyncMock(side_effect=flaky_sync)
    registry = PermissionRegistry(resources={"user": None})

    result = await SeedTenantPermissionsUseCase(tenant_db, registry, registrar).execute()

    assert result.is_ok()
    assert result.value.mode == SeedingMode.fallback


@pytest.mark.asyncio
async def test_fallback_failure_is_reported(tenant_db, registrar):
    tenant_db.roles.sync_permissions = AsyncMock(side_effect=RuntimeError("database gone"))
    registry = PermissionRegistry(resources={"user": None})

    result = await SeedTenantPermissionsUseCase(tenant_db, registry, registrar).execute()

    assert result.is_err()
    assert result.error.code == "SEEDING_FAILED"
    assert "database gone" in result.error.reason
    tenant_db.commit.assert_not_awaited()
