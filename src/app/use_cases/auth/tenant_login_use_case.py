"""
Tenant Login Use Case

Authenticates a tenant user against the tenant database and issues a
tenant-scoped JWT.
"""

import bcrypt

from libs.result import Error, Result, Return
from src.api.utils.jwt import generate_jwt
from src.app.services.unit_of_work import TenantUnitOfWork

from .dtos import TenantLoginResponse

# Precomputed so the unknown-user path costs one bcrypt check, like a real one
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(12))


class TenantLoginUseCase:
    """
    Use case for tenant panel login.

    Business Rules:
    - Email is matched trimmed and lower-cased, as stored on creation
    - Constant-time password comparison to prevent timing attacks
    - Users without any role cannot access the panel (NO_PANEL_ACCESS)
    - JWT carries user_id, tenant_id, role names and the guard
    """

    def __init__(self, uow: TenantUnitOfWork, guard_name: str = "tenant"):
        self.uow = uow
        self.guard_name = guard_name

    async def execute(self, email: str, password: str) -> Result[TenantLoginResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())

            # Always perform hash check even if user not found
            if user is None:
                bcrypt.checkpw(password.encode(), _DUMMY_HASH)
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            if not bcrypt.checkpw(password.encode(), user.password_hash.encode()):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            roles = await self.uow.roles.get_roles_for_user(user.id)
            role_names = [role.name for role in roles if role.guard_name == self.guard_name]
            if not role_names:
                return Return.err(
                    Error("NO_PANEL_ACCESS", "User is not allowed to access this panel")
                )

            access_token = generate_jwt(
                user_id=user.id,
                tenant_id=self.uow.tenant_id,
                roles=role_names,
                guard=self.guard_name,
            )

            return Return.ok(
                TenantLoginResponse(
                    access_token=access_token,
                    user_id=str(user.id),
                    tenant_id=self.uow.tenant_id,
                    roles=role_names,
                )
            )
