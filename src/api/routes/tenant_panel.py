"""
Tenant Panel Routes

Served on tenant domains: the tenant is identified by the request host.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.tenant_resolver import (
    get_current_tenant,
    get_tenant_unit_of_work,
    require_permission,
)
from src.api.utils.validators import Email
from src.app.services.permission_registrar import PermissionRegistrar
from src.app.services.unit_of_work import TenantUnitOfWork
from src.app.use_cases.auth import TenantLoginResponse, TenantLoginUseCase
from src.app.use_cases.tenants import TenantResponse
from src.app.use_cases.users import (
    CreateTenantUserCommand,
    CreateTenantUserUseCase,
    ListTenantUsersUseCase,
    PanelUser,
    SyncUserRolesUseCase,
    TenantUserListResponse,
    TenantUserResponse,
)
from src.depends import get_permission_registrar

router = APIRouter(prefix="/tenant", tags=["Tenant Panel"])


class CurrentTenantResponse(BaseModel):
    id: str
    name: Optional[str] = None
    domain: Optional[str] = None


class TenantLoginRequest(BaseModel):
    email: Email
    password: str = Field(..., min_length=1)


class CreateTenantUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Email
    password: str = Field(..., min_length=6)
    roles: List[str] = Field(default_factory=list)


class SyncUserRolesRequest(BaseModel):
    roles: List[str]


@router.get("", response_model=CurrentTenantResponse)
async def current_tenant(tenant: TenantResponse = Depends(get_current_tenant)):
    """
    Current Tenant

    Raises:
        - 404 Not Found: TENANT_NOT_IDENTIFIED
        - 403 Forbidden: TENANT_INACTIVE
    """
    return CurrentTenantResponse(id=tenant.id, name=tenant.name, domain=tenant.domain)


@router.post("/auth/login", response_model=TenantLoginResponse)
async def login(
    request: TenantLoginRequest,
    tenant_uow: TenantUnitOfWork = Depends(get_tenant_unit_of_work),
):
    """
    Tenant Panel Login

    Raises:
        - 401 Unauthorized: INVALID_CREDENTIALS
        - 403 Forbidden: NO_PANEL_ACCESS (user holds no role)
    """
    use_case = TenantLoginUseCase(tenant_uow, guard_name=ApplicationConfig.TENANT_GUARD)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "NO_PANEL_ACCESS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


@router.get("/users", response_model=TenantUserListResponse)
async def list_users(
    user: PanelUser = Depends(require_permission("view_any_user")),
    tenant_uow: TenantUnitOfWork = Depends(get_tenant_unit_of_work),
):
    result = await ListTenantUsersUseCase(tenant_uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post("/users", status_code=status.HTTP_201_CREATED, response_model=TenantUserResponse)
async def create_user(
    request: CreateTenantUserRequest,
    user: PanelUser = Depends(require_permission("create_user")),
    tenant_uow: TenantUnitOfWork = Depends(get_tenant_unit_of_work),
):
    """
    Create Tenant User

    Raises:
        - 409 Conflict: EMAIL_ALREADY_EXISTS
        - 422 Unprocessable Entity: ROLE_NOT_FOUND
    """
    command = CreateTenantUserCommand(
        name=request.name, email=request.email, password=request.password, roles=request.roles
    )
    use_case = CreateTenantUserUseCase(tenant_uow, bcrypt_rounds=ApplicationConfig.BCRYPT_ROUNDS)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "ROLE_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        raise ServerError(error)

    return result.value


@router.put("/users/{user_id}/roles", response_model=TenantUserResponse)
async def sync_user_roles(
    user_id: UUID,
    request: SyncUserRolesRequest,
    user: PanelUser = Depends(require_permission("update_user")),
    tenant_uow: TenantUnitOfWork = Depends(get_tenant_unit_of_work),
    registrar: PermissionRegistrar = Depends(get_permission_registrar),
):
    """
    Replace a User's Roles

    Raises:
        - 404 Not Found: USER_NOT_FOUND
        - 422 Unprocessable Entity: ROLE_NOT_FOUND
    """
    result = await SyncUserRolesUseCase(tenant_uow).execute(user_id, request.roles)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "ROLE_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        raise ServerError(error)

    await registrar.forget_cached_permissions(user.tenant_id)
    return result.value
