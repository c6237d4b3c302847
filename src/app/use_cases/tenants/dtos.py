"""
Tenant Use Case DTOs (Data Transfer Objects)

All Command and Response classes for tenant domain.
Provides type safety and clear contracts between layers.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.domain.entities import SeedingMode, Tenant, TenantStatus


# ============================================================================
# Command DTOs
# ============================================================================


class CreateTenantCommand(BaseModel):
    """Command for creating a tenant with its domain and admin user"""

    domain: Optional[str] = None
    email: Optional[str] = None
    admin_password: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: TenantStatus = TenantStatus.active
    description: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class UpdateTenantCommand(BaseModel):
    """
    Command for editing a tenant.

    Fields left unset are not touched. `domain=None` keeps the binding,
    an empty string removes it.
    """

    domain: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[TenantStatus] = None
    description: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


# ============================================================================
# Response DTOs
# ============================================================================


class TenantResponse(BaseModel):
    """Tenant with its current domain"""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: TenantStatus
    description: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    domain: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, tenant: Tenant, domain: Optional[str]) -> "TenantResponse":
        return cls(
            id=tenant.id,
            name=tenant.name,
            email=tenant.email,
            phone=tenant.phone,
            address=tenant.address,
            status=tenant.status,
            description=tenant.description,
            data=tenant.data,
            domain=domain,
            created_at=tenant.created_at.isoformat(),
            updated_at=tenant.updated_at.isoformat(),
        )


class CreateTenantResponse(BaseModel):
    """Response for create tenant use case"""

    tenant: TenantResponse
    domain: Optional[str] = None
    admin_user_id: Optional[str] = None
    admin_role_assigned: bool = False
    seeding_job_id: Optional[str] = None


class UpdateTenantResponse(BaseModel):
    """Response for update tenant use case"""

    tenant: TenantResponse
    domain_changed: bool = False


class DeleteTenantResponse(BaseModel):
    """Response for delete tenant use case"""

    tenant_id: str
    status: str = "deleted"
    domains_deleted: int = 0


class TenantListResponse(BaseModel):
    """Response for list tenants use case"""

    tenants: List[TenantResponse] = Field(default_factory=list)
    limit: int
    offset: int


class SeedPermissionsResponse(BaseModel):
    """Outcome of a seeding run"""

    tenant_id: str
    mode: SeedingMode
    role: str
    permission_count: int


class AssignAdminRoleResponse(BaseModel):
    """Response for assign admin role use case"""

    assigned: bool
    user_id: Optional[str] = None
    newly_assigned: bool = False


class DispatchSeedingResponse(BaseModel):
    """Response for an operator-triggered seeding dispatch"""

    tenant_id: str
    dispatched: bool
    job_id: Optional[str] = None
