"""
Tenant User Use Case DTOs

Command and Response classes for tenant panel user management.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class CreateTenantUserCommand(BaseModel):
    """Command for creating a tenant user"""

    name: str
    email: str
    password: str
    roles: List[str] = Field(default_factory=list)


class TenantUserResponse(BaseModel):
    """Tenant user with role names"""

    id: str
    name: str
    email: str
    roles: List[str]
    created_at: str


class TenantUserListResponse(BaseModel):
    users: List[TenantUserResponse]


class PanelUser(BaseModel):
    """Authenticated tenant panel user with effective permissions"""

    id: str
    email: str
    tenant_id: str
    permissions: List[str]
    checked_permission: Optional[str] = None
