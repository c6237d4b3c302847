"""
Tenant Management Use Cases

All tenant-related business logic.
"""

from .assign_admin_role_use_case import AssignAdminRoleUseCase
from .create_tenant_use_case import CreateTenantUseCase
from .delete_tenant_use_case import DeleteTenantUseCase
from .dispatch_seeding_use_case import DispatchSeedingUseCase
from .dtos import (
    AssignAdminRoleResponse,
    CreateTenantCommand,
    CreateTenantResponse,
    DeleteTenantResponse,
    DispatchSeedingResponse,
    SeedPermissionsResponse,
    TenantListResponse,
    TenantResponse,
    UpdateTenantCommand,
    UpdateTenantResponse,
)
from .get_tenant_use_case import GetTenantUseCase
from .identify_tenant_use_case import IdentifyTenantUseCase, host_to_domain
from .list_tenants_use_case import ListTenantsUseCase
from .seed_permissions_use_case import (
    FALLBACK_PERMISSIONS,
    SUPER_ADMIN_ROLE,
    SeedTenantPermissionsUseCase,
)
from .update_tenant_use_case import UpdateTenantUseCase
from .validate_domain_use_case import ValidateTenantDomainUseCase

__all__ = [
    "CreateTenantUseCase",
    "UpdateTenantUseCase",
    "DeleteTenantUseCase",
    "GetTenantUseCase",
    "IdentifyTenantUseCase",
    "host_to_domain",
    "ListTenantsUseCase",
    "ValidateTenantDomainUseCase",
    "DispatchSeedingUseCase",
    "SeedTenantPermissionsUseCase",
    "AssignAdminRoleUseCase",
    "CreateTenantCommand",
    "UpdateTenantCommand",
    "TenantResponse",
    "CreateTenantResponse",
    "UpdateTenantResponse",
    "DeleteTenantResponse",
    "TenantListResponse",
    "SeedPermissionsResponse",
    "AssignAdminRoleResponse",
    "DispatchSeedingResponse",
    "SUPER_ADMIN_ROLE",
    "FALLBACK_PERMISSIONS",
]
