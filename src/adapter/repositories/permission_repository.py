from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.permission_repository import IPermissionRepository
from src.domain.entities import Permission


class PermissionRepository(IPermissionRepository):
    """Permission repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def first_or_create(self, name: str, guard_name: str) -> Permission:
        """Get permission (name, guard) or create it"""
        stmt = select(Permission).where(
            Permission.name == name, Permission.guard_name == guard_name
        )
        result = await self.session.exec(stmt)
        permission = result.one_or_none()
        if permission is None:
            permission = Permission(name=name, guard_name=guard_name)
            self.session.add(permission)
            await self.session.flush()
        return permission
