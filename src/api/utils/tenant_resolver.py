"""
Tenant Panel Request Context

Identifies the tenant from the request host, opens its database for the
request and enforces per-permission access for tenant users.
"""

from typing import AsyncIterator, Callable
from uuid import UUID

from fastapi import Depends, status

from libs.result import Error
from src.api.error import ClientError, ServerError
from src.app.services.permission_registrar import PermissionRegistrar
from src.app.services.tenancy import Tenancy
from src.app.services.unit_of_work import TenantUnitOfWork, UnitOfWork
from src.app.use_cases.tenants import IdentifyTenantUseCase, TenantResponse
from src.app.use_cases.users import AuthorizeTenantUserUseCase, PanelUser
from src.depends import (
    get_permission_registrar,
    get_request_host,
    get_tenancy,
    get_token_payload,
    get_unit_of_work,
)
from src.domain.exceptions import TenancyError


async def get_current_tenant(
    host: str = Depends(get_request_host),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> TenantResponse:
    """
    Raises:
        - 404 Not Found: TENANT_NOT_IDENTIFIED
        - 403 Forbidden: TENANT_INACTIVE
    """
    result = await IdentifyTenantUseCase(uow).execute(host)

    if result.is_err():
        error = result.error
        if error.code == "TENANT_NOT_IDENTIFIED":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "TENANT_INACTIVE":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


async def get_tenant_unit_of_work(
    tenant: TenantResponse = Depends(get_current_tenant),
    tenancy: Tenancy = Depends(get_tenancy),
) -> AsyncIterator[TenantUnitOfWork]:
    """Run the request inside the identified tenant's database"""
    try:
        available = await tenancy.database_exists(tenant.id)
    except TenancyError as e:
        raise ServerError(
            Error("TENANT_DATABASE_UNAVAILABLE", "Tenant database is unavailable", reason=str(e)),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    if not available:
        raise ServerError(
            Error("TENANT_DATABASE_UNAVAILABLE", "Tenant database is unavailable"),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    async with tenancy.run(tenant.id) as tenant_uow:
        yield tenant_uow


def require_permission(permission: str) -> Callable:
    """Dependency factory: authenticated tenant user holding `permission`"""

    async def dependency(
        payload: dict = Depends(get_token_payload),
        tenant: TenantResponse = Depends(get_current_tenant),
        tenant_uow: TenantUnitOfWork = Depends(get_tenant_unit_of_work),
        registrar: PermissionRegistrar = Depends(get_permission_registrar),
    ) -> PanelUser:
        if payload.get("tenant_id") != tenant.id:
            raise ClientError(
                Error("TENANT_MISMATCH", "Token was issued for another tenant"),
                status_code=status.HTTP_403_FORBIDDEN,
            )

        try:
            user_id = UUID(payload.get("user_id", ""))
        except ValueError:
            raise ClientError(
                Error("INVALID_TOKEN", "Invalid or expired token"),
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        result = await AuthorizeTenantUserUseCase(tenant_uow, registrar).execute(
            user_id, permission
        )

        if result.is_err():
            error = result.error
            if error.code == "USER_NOT_FOUND":
                raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
            elif error.code == "PERMISSION_DENIED":
                raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
            raise ServerError(error)

        return result.value

    return dependency
