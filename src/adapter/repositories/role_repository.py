from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.role_repository import IRoleRepository
from src.domain.entities import Permission, Role, RoleHasPermission, UserHasRole


class RoleRepository(IRoleRepository):
    """Role repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def first_or_create(self, name: str, guard_name: str) -> Role:
        """Get role (name, guard) or create it"""
        role = await self.get_by_name(name, guard_name)
        if role is None:
            role = Role(name=name, guard_name=guard_name)
            self.session.add(role)
            await self.session.flush()
        return role

    async def get_by_name(self, name: str, guard_name: str) -> Optional[Role]:
        """Get role by name within a guard"""
        stmt = select(Role).where(Role.name == name, Role.guard_name == guard_name)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_names(self, names: List[str], guard_name: str) -> List[Role]:
        """Get roles by names within a guard"""
        if not names:
            return []
        stmt = select(Role).where(Role.name.in_(names), Role.guard_name == guard_name)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def sync_permissions(self, role: Role, permissions: List[Permission]) -> None:
        """Replace the role's permission set with exactly `permissions`"""
        wanted = {p.id for p in permissions}

        stmt = select(RoleHasPermission.permission_id).where(
            RoleHasPermission.role_id == role.id
        )
        result = await self.session.exec(stmt)
        current = set(result.all())

        stale = current - wanted
        if stale:
            await self.session.execute(
                delete(RoleHasPermission).where(
                    RoleHasPermission.role_id == role.id,
                    RoleHasPermission.permission_id.in_(stale),
                )
            )
        for permission_id in wanted - current:
            self.session.add(RoleHasPermission(role_id=role.id, permission_id=permission_id))
        await self.session.flush()

    async def get_permission_map(self, guard_name: str) -> Dict[str, List[str]]:
        """Map role name -> permission names for a guard"""
        roles = await self.session.exec(select(Role).where(Role.guard_name == guard_name))
        permission_map: Dict[str, List[str]] = {role.name: [] for role in roles.all()}

        stmt = (
            select(Role.name, Permission.name)
            .join(RoleHasPermission, RoleHasPermission.role_id == Role.id)
            .join(Permission, Permission.id == RoleHasPermission.permission_id)
            .where(Role.guard_name == guard_name)
            .order_by(Role.name, Permission.name)
        )
        result = await self.session.exec(stmt)
        for role_name, permission_name in result.all():
            permission_map[role_name].append(permission_name)
        return permission_map

    async def get_roles_for_user(self, user_id: UUID) -> List[Role]:
        """Roles held by a user"""
        stmt = (
            select(Role)
            .join(UserHasRole, UserHasRole.role_id == Role.id)
            .where(UserHasRole.user_id == user_id)
            .order_by(Role.name)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def assign_to_user(self, user_id: UUID, role: Role) -> bool:
        """Grant role to user; returns False if already held"""
        existing = await self.session.get(UserHasRole, (user_id, role.id))
        if existing is not None:
            return False
        self.session.add(UserHasRole(user_id=user_id, role_id=role.id))
        await self.session.flush()
        return True

    async def sync_user_roles(self, user_id: UUID, roles: List[Role]) -> None:
        """Replace the user's role set with exactly `roles`"""
        wanted = {r.id for r in roles}

        stmt = select(UserHasRole.role_id).where(UserHasRole.user_id == user_id)
        result = await self.session.exec(stmt)
        current = set(result.all())

        stale = current - wanted
        if stale:
            await self.session.execute(
                delete(UserHasRole).where(
                    UserHasRole.user_id == user_id, UserHasRole.role_id.in_(stale)
                )
            )
        for role_id in wanted - current:
            self.session.add(UserHasRole(user_id=user_id, role_id=role_id))
        await self.session.flush()
