"""
Update Tenant Use Case

Edits tenant metadata and keeps the single domain binding in sync.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, Domain

from .create_tenant_use_case import normalize_domain
from .dtos import TenantResponse, UpdateTenantCommand, UpdateTenantResponse

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "email", "phone", "address", "status", "description", "data")
NON_NULLABLE_FIELDS = ("status",)


class UpdateTenantUseCase:
    """
    Use case for editing a tenant.

    Domain synchronisation:
    - domain unset          -> binding untouched
    - same as current       -> no-op
    - empty                 -> current binding deleted, nothing created
    - different, non-empty  -> current binding deleted; new one created
                               unless that hostname is already bound
                               (skipped silently)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, tenant_id: str, command: UpdateTenantCommand
    ) -> Result[UpdateTenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            changes = command.model_dump(include=set(EDITABLE_FIELDS), exclude_unset=True)
            for field in NON_NULLABLE_FIELDS:
                if field in changes and changes[field] is None:
                    del changes[field]
            if changes.get("email"):
                changes["email"] = changes["email"].strip().lower()
            for field, value in changes.items():
                setattr(tenant, field, value)
            tenant = await self.uow.tenants.update(tenant)

            current = await self.uow.domains.get_current_for_tenant(tenant_id)
            current_name = current.domain if current else None
            bound_domain = current_name
            domain_changed = False

            if "domain" in command.model_fields_set and command.domain is not None:
                new_name = normalize_domain(command.domain)
                if new_name != (current_name or ""):
                    if current_name:
                        await self.uow.domains.delete_for_tenant(tenant_id, current_name)
                    bound_domain = None
                    if new_name:
                        if await self.uow.domains.get_by_domain(new_name) is None:
                            await self.uow.domains.create(
                                Domain(domain=new_name, tenant_id=tenant_id)
                            )
                            bound_domain = new_name
                        else:
                            logger.warning(
                                f"Domain {new_name} already bound, tenant {tenant_id} left unbound"
                            )
                    domain_changed = bound_domain != current_name

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    action="tenant_updated",
                    event_metadata={"fields": sorted(changes.keys())},
                )
            )
            if domain_changed:
                await self.uow.audit_events.create(
                    AuditEvent(
                        tenant_id=tenant_id,
                        action="tenant_domain_changed",
                        event_metadata={"from": current_name, "to": bound_domain},
                    )
                )

            await self.uow.commit()

            return Return.ok(
                UpdateTenantResponse(
                    tenant=TenantResponse.from_entity(tenant, bound_domain),
                    domain_changed=domain_changed,
                )
            )
