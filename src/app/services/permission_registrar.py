"""
Cached role -> permission lookups for tenant users.

The role map of a tenant is cached under `permissions:{tenant_id}`; it
must be forgotten whenever roles or their permissions change (seeding,
role edits) so no stale mapping survives a tenant context switch.
"""

import logging
from typing import Dict, List, Optional, Set

from src.app.services.cache import Cache
from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.entities import TenantUser

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "permissions:"


class PermissionRegistrar:
    def __init__(self, cache: Cache, guard_name: str = "tenant", ttl: int = 86400):
        self.cache = cache
        self.guard_name = guard_name
        self.ttl = ttl

    @staticmethod
    def cache_key(tenant_id: str) -> str:
        return f"{CACHE_KEY_PREFIX}{tenant_id}"

    async def get_permission_map(
        self, uow: TenantUnitOfWork, tenant_id: str
    ) -> Dict[str, List[str]]:
        """Role name -> permission names, read through the cache"""
        key = self.cache_key(tenant_id)
        permission_map = await self.cache.get(key)
        if permission_map is None:
            permission_map = await uow.roles.get_permission_map(self.guard_name)
            await self.cache.set(key, permission_map, ttl=self.ttl)
        return permission_map

    async def get_permissions_for_user(
        self, uow: TenantUnitOfWork, tenant_id: str, user: TenantUser
    ) -> Set[str]:
        roles = await uow.roles.get_roles_for_user(user.id)
        permission_map = await self.get_permission_map(uow, tenant_id)
        permissions: Set[str] = set()
        for role in roles:
            permissions.update(permission_map.get(role.name, []))
        return permissions

    async def forget_cached_permissions(self, tenant_id: Optional[str] = None) -> None:
        if tenant_id is None:
            await self.cache.delete_prefix(CACHE_KEY_PREFIX)
        else:
            await self.cache.delete(self.cache_key(tenant_id))
        logger.debug(f"Forgot cached permissions for {tenant_id or 'all tenants'}")
