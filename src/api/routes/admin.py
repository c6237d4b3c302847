"""
Admin API Routes - Tenant Operator Endpoints

Tenant lifecycle management for operators and internal integrations.
Authentication is via Admin API Key, not tenant user JWTs.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, field_validator, model_validator

from libs.result import Error
from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.api.utils.validators import Email
from src.app.services.job_queue import JobQueue, JobStatus
from src.app.services.provisioning import TenantProvisioner
from src.app.services.tenancy import Tenancy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit import ActivityLogResponse, GetActivityLogUseCase
from src.app.use_cases.tenants import (
    CreateTenantCommand,
    CreateTenantResponse,
    CreateTenantUseCase,
    DeleteTenantResponse,
    DeleteTenantUseCase,
    DispatchSeedingResponse,
    DispatchSeedingUseCase,
    GetTenantUseCase,
    ListTenantsUseCase,
    TenantListResponse,
    TenantResponse,
    UpdateTenantCommand,
    UpdateTenantResponse,
    UpdateTenantUseCase,
    ValidateTenantDomainUseCase,
)
from src.depends import get_job_queue, get_provisioner, get_tenancy, get_unit_of_work
from src.domain.entities import TenantStatus
from config import ApplicationConfig

router = APIRouter(
    prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_admin_api_key)]
)

MIN_PASSWORD_LENGTH = 6


class TenantCreateRequest(BaseModel):
    """
    Tenant creation form

    Domain and admin email are required; the admin password must be
    confirmed.
    """

    domain: str = Field(..., min_length=1, max_length=255)
    email: Email = Field(..., description="Initial admin login email")
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    password_confirmation: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    status: TenantStatus = TenantStatus.active
    description: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError("Password confirmation does not match")
        return self


class TenantUpdateRequest(BaseModel):
    """
    Tenant edit form

    Omitted fields are left unchanged; `domain: ""` removes the binding.
    """

    domain: Optional[str] = Field(None, max_length=255)
    email: Optional[Email] = None
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    status: Optional[TenantStatus] = None
    description: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value):
        if value is None:
            raise ValueError("status cannot be null")
        return value


class JobStatusResponse(BaseModel):
    job_id: str
    name: str
    status: JobStatus
    attempts: int
    queued_at: Optional[str] = None
    finished_at: Optional[str] = None
    result: Optional[Any] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


def _raise_for_tenant_error(error: Error):
    if error.code == "TENANT_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    elif error.code == "DOMAIN_ALREADY_EXISTS":
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    elif error.code in ("DOMAIN_REQUIRED", "INVALID_LIMIT", "INVALID_OFFSET"):
        raise ClientError(error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
    elif error.code == "TENANT_DATABASE_MISSING":
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    raise ServerError(error)


@router.post(
    "/tenants",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateTenantResponse,
)
async def create_tenant(
    request: TenantCreateRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    tenancy: Tenancy = Depends(get_tenancy),
    provisioner: TenantProvisioner = Depends(get_provisioner),
):
    """
    Create Tenant

    Creates the tenant, binds its domain, provisions its database, creates
    the initial admin user and queues permission seeding.

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 409 Conflict: DOMAIN_ALREADY_EXISTS
        - 422 Unprocessable Entity: Invalid form input
        - 500 Internal Server Error: TENANT_PROVISIONING_FAILED
    """
    validation = await ValidateTenantDomainUseCase(uow).execute(request.domain)
    if validation.is_err():
        _raise_for_tenant_error(validation.error)

    command = CreateTenantCommand(
        domain=validation.value,
        email=request.email,
        admin_password=request.password,
        name=request.name,
        phone=request.phone,
        address=request.address,
        status=request.status,
        description=request.description,
        data=request.data,
    )

    use_case = CreateTenantUseCase(
        uow, tenancy, provisioner, bcrypt_rounds=ApplicationConfig.BCRYPT_ROUNDS
    )
    result = await use_case.execute(command)

    if result.is_err():
        _raise_for_tenant_error(result.error)

    return result.value


@router.get("/tenants", response_model=TenantListResponse)
async def list_tenants(
    status_filter: Optional[TenantStatus] = Query(None, alias="status"),
    limit: int = Query(50),
    offset: int = Query(0),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListTenantsUseCase(uow).execute(
        status=status_filter, limit=limit, offset=offset
    )

    if result.is_err():
        _raise_for_tenant_error(result.error)

    return result.value


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
async def get_tenant(tenant_id: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await GetTenantUseCase(uow).execute(tenant_id)

    if result.is_err():
        _raise_for_tenant_error(result.error)

    return result.value


@router.put("/tenants/{tenant_id}", response_model=UpdateTenantResponse)
async def update_tenant(
    tenant_id: str,
    request: TenantUpdateRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Edit Tenant

    Updates tenant metadata and synchronises its domain binding.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: DOMAIN_ALREADY_EXISTS (bound to another tenant)
    """
    fields = request.model_dump(exclude_unset=True)

    if fields.get("domain"):
        validation = await ValidateTenantDomainUseCase(uow).execute(
            request.domain, tenant_id=tenant_id
        )
        if validation.is_err():
            _raise_for_tenant_error(validation.error)

    result = await UpdateTenantUseCase(uow).execute(tenant_id, UpdateTenantCommand(**fields))

    if result.is_err():
        _raise_for_tenant_error(result.error)

    return result.value


@router.delete("/tenants/{tenant_id}", response_model=DeleteTenantResponse)
async def delete_tenant(
    tenant_id: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    provisioner: TenantProvisioner = Depends(get_provisioner),
):
    """
    Delete Tenant

    Removes the tenant, its domain bindings and its database.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 500 Internal Server Error: TENANT_DEPROVISIONING_FAILED
    """
    result = await DeleteTenantUseCase(uow, provisioner).execute(tenant_id)

    if result.is_err():
        _raise_for_tenant_error(result.error)

    return result.value


@router.post(
    "/tenants/{tenant_id}/seed",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=DispatchSeedingResponse,
)
async def seed_tenant_permissions(
    tenant_id: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    provisioner: TenantProvisioner = Depends(get_provisioner),
):
    """
    Re-run Permission Seeding

    `dispatched` is false when a seeding run for the tenant is already
    pending or running.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: TENANT_DATABASE_MISSING
    """
    result = await DispatchSeedingUseCase(uow, provisioner).execute(tenant_id)

    if result.is_err():
        _raise_for_tenant_error(result.error)

    return result.value


@router.get("/activity-logs", response_model=ActivityLogResponse)
async def get_activity_logs(
    tenant_id: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    limit: int = Query(50),
    cursor: Optional[str] = Query(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetActivityLogUseCase(uow).execute(
        tenant_id=tenant_id, action=action, limit=limit, cursor=cursor
    )

    if result.is_err():
        _raise_for_tenant_error(result.error)

    return result.value


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
async def get_job(job_id: str, queue: JobQueue = Depends(get_job_queue)):
    record = await queue.get_job(job_id)
    if record is None:
        raise ClientError(
            Error("JOB_NOT_FOUND", "Job not found"), status_code=status.HTTP_404_NOT_FOUND
        )

    return JobStatusResponse(
        job_id=record.job_id,
        name=record.name,
        status=record.status,
        attempts=record.attempts,
        queued_at=record.queued_at.isoformat() if record.queued_at else None,
        finished_at=record.finished_at.isoformat() if record.finished_at else None,
        result=record.result,
        error=record.error,
        metadata=record.metadata,
    )
