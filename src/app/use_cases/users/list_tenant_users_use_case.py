"""List Tenant Users Use Case"""

from libs.result import Result, Return
from src.app.services.unit_of_work import TenantUnitOfWork

from .dtos import TenantUserListResponse, TenantUserResponse


class ListTenantUsersUseCase:
    def __init__(self, uow: TenantUnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[TenantUserListResponse]:
        async with self.uow:
            users = await self.uow.users.list_all()
            items = []
            for user in users:
                roles = await self.uow.roles.get_roles_for_user(user.id)
                items.append(
                    TenantUserResponse(
                        id=str(user.id),
                        name=user.name,
                        email=user.email,
                        roles=[role.name for role in roles],
                        created_at=user.created_at.isoformat() + "Z",
                    )
                )
            return Return.ok(TenantUserListResponse(users=items))
