"""
Create Tenant Use Case

Creates the tenant record and its domain binding, provisions the tenant
database, creates the initial admin user inside it and grants that user
super_admin.
"""

import logging
from typing import TYPE_CHECKING, Optional

import bcrypt

from libs.result import Error, Result, Return
from src.app.services.tenancy import Tenancy
from src.app.services.unit_of_work import TenantUnitOfWork, UnitOfWork
from src.domain.entities import AuditEvent, Domain, Tenant, TenantUser
from src.domain.exceptions import TenancyError

from .assign_admin_role_use_case import AssignAdminRoleUseCase
from .dtos import CreateTenantCommand, CreateTenantResponse, TenantResponse

if TYPE_CHECKING:
    from src.app.services.provisioning import TenantProvisioner

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_NAME = "Admin"


def normalize_domain(domain: Optional[str]) -> str:
    return (domain or "").strip().lower()


class CreateTenantUseCase:
    """
    Use case for tenant creation.

    Business Rules:
    - Domain is trimmed and lower-cased
    - Empty domain, or a domain that is already bound, creates no binding
    - Central records are committed before the tenant database is created
    - Database provisioning failure -> TENANT_PROVISIONING_FAILED; the
      tenant record is kept
    - Admin user is created only when both email and password are given,
      and only if no user with that email exists in the tenant database
    - super_admin is granted if already seeded; otherwise the seeding job
      grants it once it runs
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tenancy: Tenancy,
        provisioner: "TenantProvisioner",
        bcrypt_rounds: int = 12,
    ):
        self.uow = uow
        self.tenancy = tenancy
        self.provisioner = provisioner
        self.bcrypt_rounds = bcrypt_rounds

    async def execute(self, command: CreateTenantCommand) -> Result[CreateTenantResponse]:
        domain_name = normalize_domain(command.domain)
        admin_email = (command.email or "").strip().lower() or None

        async with self.uow:
            tenant = Tenant(
                name=command.name,
                email=admin_email,
                phone=command.phone,
                address=command.address,
                status=command.status,
                description=command.description,
                data=command.data,
            )
            tenant = await self.uow.tenants.create(tenant)

            bound_domain = None
            if not domain_name:
                logger.info(f"Tenant {tenant.id} created without a domain")
            elif await self.uow.domains.get_by_domain(domain_name) is not None:
                logger.warning(f"Domain {domain_name} already bound, tenant {tenant.id} left unbound")
            else:
                await self.uow.domains.create(Domain(domain=domain_name, tenant_id=tenant.id))
                bound_domain = domain_name

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant.id,
                    action="tenant_created",
                    event_metadata={"name": tenant.name, "domain": bound_domain},
                )
            )
            await self.uow.commit()
            tenant_response = TenantResponse.from_entity(tenant, bound_domain)

        try:
            job_id = await self.provisioner.provision(tenant_response.id, admin_email)
        except TenancyError as e:
            logger.error(f"Provisioning failed for tenant {tenant_response.id}: {e}")
            return Return.err(
                Error(
                    "TENANT_PROVISIONING_FAILED",
                    "Tenant database could not be provisioned",
                    reason=str(e),
                )
            )

        admin_user_id = None
        admin_role_assigned = False
        if admin_email and command.admin_password:
            async with self.tenancy.run(tenant_response.id) as tenant_uow:
                admin = await self._create_admin(
                    tenant_uow, command.name, admin_email, command.admin_password
                )
                admin_user_id = str(admin.id)
                assign_result = await AssignAdminRoleUseCase(tenant_uow).execute(admin)
                admin_role_assigned = assign_result.value.assigned

        return Return.ok(
            CreateTenantResponse(
                tenant=tenant_response,
                domain=bound_domain,
                admin_user_id=admin_user_id,
                admin_role_assigned=admin_role_assigned,
                seeding_job_id=job_id,
            )
        )

    async def _create_admin(
        self, tenant_uow: TenantUnitOfWork, name: Optional[str], email: str, password: str
    ) -> TenantUser:
        async with tenant_uow:
            user = await tenant_uow.users.get_by_email(email)
            if user is not None:
                logger.info(f"Admin {email} already exists in tenant {tenant_uow.tenant_id}")
            else:
                password_hash = bcrypt.hashpw(
                    password.encode(), bcrypt.gensalt(self.bcrypt_rounds)
                )
                user = TenantUser(
                    name=name or DEFAULT_ADMIN_NAME,
                    email=email,
                    password_hash=password_hash.decode(),
                )
                user = await tenant_uow.users.create(user)
            # committing (not rolling back) keeps the user loaded after the block
            await tenant_uow.commit()
            return user
