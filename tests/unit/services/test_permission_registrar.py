"""
Unit tests for PermissionRegistrar
"""

import pytest
from unittest.mock import AsyncMock

from src.adapter.services.cache import InMemoryCache
from src.app.services.permission_registrar import PermissionRegistrar
from src.domain.entities import Role, TenantUser


@pytest.fixture
def user():
    return TenantUser(name="Jane", email="jane@acme.test", password_hash="x" * 60)


@pytest.mark.asyncio
async def test_permissions_are_union_of_roles(mock_tenant_uow, user):
    mock_tenant_uow.roles.get_roles_for_user = AsyncMock(
        return_value=[Role(name="editor", guard_name="tenant"), Role(name="viewer", guard_name="tenant")]
    )
    mock_tenant_uow.roles.get_permission_map = AsyncMock(
        return_value={"editor": ["update_user"], "viewer": ["view_user"], "other": ["delete_user"]}
    )
    registrar = PermissionRegistrar(InMemoryCache())

    permissions = await registrar.get_permissions_for_user(mock_tenant_uow, "acme", user)

    assert permissions == {"update_user", "view_user"}


@pytest.mark.asyncio
async def test_permission_map_is_cached_per_tenant(mock_tenant_uow):
    mock_tenant_uow.roles.get_permission_map = AsyncMock(return_value={"super_admin": ["view_user"]})
    cache = InMemoryCache()
    registrar = PermissionRegistrar(cache, ttl=60)

    await registrar.get_permission_map(mock_tenant_uow, "acme")
    await registrar.get_permission_map(mock_tenant_uow, "acme")

    mock_tenant_uow.roles.get_permission_map.assert_awaited_once_with("tenant")
    assert await cache.get("permissions:acme") == {"super_admin": ["view_user"]}


@pytest.mark.asyncio
async def test_forget_one_tenant_or_all():
    cache = InMemoryCache()
    registrar = PermissionRegistrar(cache)
    await cache.set("permissions:a", {})
    await cache.set("permissions:b", {})

    await registrar.forget_cached_permissions("a")
    assert await cache.get("permissions:a") is None
    assert await cache.get("permissions:b") == {}

    await registrar.forget_cached_permissions()
    assert await cache.get("permissions:b") is None
