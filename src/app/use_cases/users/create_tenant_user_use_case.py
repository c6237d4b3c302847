"""
Create Tenant User Use Case

Adds a user to the tenant database, optionally with roles.
"""

import bcrypt

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.entities import TenantUser

from .dtos import CreateTenantUserCommand, TenantUserResponse


class CreateTenantUserUseCase:
    """
    Use case for creating a tenant user.

    Business Rules:
    - Email is unique within the tenant (EMAIL_ALREADY_EXISTS)
    - Every requested role must exist under the user's guard (ROLE_NOT_FOUND)
    - Password stored as bcrypt hash
    """

    def __init__(self, uow: TenantUnitOfWork, bcrypt_rounds: int = 12):
        self.uow = uow
        self.bcrypt_rounds = bcrypt_rounds

    async def execute(self, command: CreateTenantUserCommand) -> Result[TenantUserResponse]:
        email = command.email.strip().lower()
        role_names = list(dict.fromkeys(command.roles))

        async with self.uow:
            if await self.uow.users.get_by_email(email) is not None:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "A user with this email already exists")
                )

            roles = await self.uow.roles.get_by_names(role_names, TenantUser.guard_name)
            missing = sorted(set(role_names) - {role.name for role in roles})
            if missing:
                return Return.err(
                    Error("ROLE_NOT_FOUND", f"Unknown role(s): {', '.join(missing)}")
                )

            password_hash = bcrypt.hashpw(
                command.password.encode(), bcrypt.gensalt(self.bcrypt_rounds)
            )
            user = await self.uow.users.create(
                TenantUser(name=command.name, email=email, password_hash=password_hash.decode())
            )
            await self.uow.roles.sync_user_roles(user.id, roles)
            await self.uow.commit()

            return Return.ok(
                TenantUserResponse(
                    id=str(user.id),
                    name=user.name,
                    email=user.email,
                    roles=sorted(role.name for role in roles),
                    created_at=user.created_at.isoformat() + "Z",
                )
            )
