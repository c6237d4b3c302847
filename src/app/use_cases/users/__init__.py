"""
User Management Use Cases

Tenant panel user business logic.
"""

from .authorize_tenant_user_use_case import AuthorizeTenantUserUseCase
from .create_tenant_user_use_case import CreateTenantUserUseCase
from .dtos import (
    CreateTenantUserCommand,
    PanelUser,
    TenantUserListResponse,
    TenantUserResponse,
)
from .list_tenant_users_use_case import ListTenantUsersUseCase
from .sync_user_roles_use_case import SyncUserRolesUseCase

__all__ = [
    "AuthorizeTenantUserUseCase",
    "ListTenantUsersUseCase",
    "CreateTenantUserUseCase",
    "SyncUserRolesUseCase",
    "CreateTenantUserCommand",
    "TenantUserResponse",
    "TenantUserListResponse",
    "PanelUser",
]
