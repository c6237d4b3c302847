"""
Integration tests for tenant permission seeding

Seeding runs inside the tenant database through the unique job.
"""

import pytest
from sqlmodel import func, select

from config import ApplicationConfig
from src.app.services.permission_registry import PermissionRegistry
from src.app.services.provisioning import TenantProvisioner
from src.app.use_cases.tenants import FALLBACK_PERMISSIONS
from src.domain.entities import Permission, Role, RoleHasPermission

ADMIN_HEADERS = {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}


async def snapshot(tenancy, tenant_id):
    """(permission names, role names, super_admin permission names)"""
    async with tenancy.run(tenant_id) as tenant_uow:
        session = tenant_uow.session
        permissions = sorted((await session.exec(select(Permission.name))).all())
        roles = sorted((await session.exec(select(Role.name))).all())
        granted = sorted(
            (
                await session.exec(
                    select(Permission.name)
                    .join(RoleHasPermission, RoleHasPermission.permission_id == Permission.id)
                    .join(Role, Role.id == RoleHasPermission.role_id)
                    .where(Role.name == "super_admin")
                )
            ).all()
        )
        links = (await session.exec(select(func.count()).select_from(RoleHasPermission))).one()
    return permissions, roles, granted, links


@pytest.mark.asyncio
async def test_full_seeding(create_tenant, tenancy, registry):
    body = await create_tenant()

    permissions, roles, granted, _ = await snapshot(tenancy, body["tenant"]["id"])

    assert permissions == sorted(registry.all_permission_names())
    assert roles == ["super_admin"]
    assert granted == permissions


@pytest.mark.asyncio
async def test_seeding_twice_equals_once(client, create_tenant, tenancy, job_queue):
    body = await create_tenant()
    tenant_id = body["tenant"]["id"]
    before = await snapshot(tenancy, tenant_id)

    response = await client.post(f"/admin/tenants/{tenant_id}/seed", headers=ADMIN_HEADERS)

    assert response.status_code == 202
    assert response.json()["dispatched"] is True
    job = await job_queue.get_job(response.json()["job_id"])
    assert job.status.value == "completed"
    assert job.result["mode"] == "full"

    assert await snapshot(tenancy, tenant_id) == before


@pytest.mark.asyncio
async def test_fallback_baseline(
    tenancy, job_queue, registrar, central_uow_factory, create_tenant
):
    body = await create_tenant()
    tenant_id = body["tenant"]["id"]

    broken = PermissionRegistry(resources={"user": None}, pages=["General Settings"])
    broken_provisioner = TenantProvisioner(
        tenancy, job_queue, broken, registrar, central_uow_factory
    )

    # wipe the full baseline so only the fallback output remains
    async with tenancy.run(tenant_id) as tenant_uow:
        async with tenant_uow:
            role = await tenant_uow.roles.get_by_name("super_admin", "tenant")
            await tenant_uow.roles.sync_permissions(role, [])
            for permission in (await tenant_uow.session.exec(select(Permission))).all():
                await tenant_uow.session.delete(permission)
            await tenant_uow.commit()

    job_id = await broken_provisioner.dispatch_seeding(tenant_id, "admin@acme.test")

    assert (await job_queue.get_job(job_id)).result["mode"] == "fallback"
    permissions, roles, granted, links = await snapshot(tenancy, tenant_id)
    assert permissions == [
        "create_user",
        "delete_user",
        "update_user",
        "view_any_user",
        "view_user",
    ]
    assert permissions == sorted(FALLBACK_PERMISSIONS)
    assert roles == ["super_admin"]
    assert granted == sorted(FALLBACK_PERMISSIONS)
    assert links == 5


@pytest.mark.asyncio
async def test_fresh_tenant_fallback(tenancy, job_queue, registrar, central_uow_factory):
    broken = PermissionRegistry(widgets=["Stats Overview"])
    broken_provisioner = TenantProvisioner(
        tenancy, job_queue, broken, registrar, central_uow_factory
    )

    job_id = await broken_provisioner.provision("fresh-tenant")

    assert (await job_queue.get_job(job_id)).status.value == "completed"
    permissions, roles, granted, links = await snapshot(tenancy, "fresh-tenant")
    assert permissions == sorted(FALLBACK_PERMISSIONS)
    assert granted == sorted(FALLBACK_PERMISSIONS)
    assert links == 5


@pytest.mark.asyncio
async def test_job_assigns_admin_created_before_seeding(
    tenancy, job_queue, registrar, registry, central_uow_factory
):
    """Admin created before the job ran still ends up with super_admin"""
    import bcrypt

    from src.domain.entities import TenantUser

    provisioner = TenantProvisioner(tenancy, job_queue, registry, registrar, central_uow_factory)
    await tenancy.create_database("race")
    await tenancy.migrate_database("race")
    async with tenancy.run("race") as tenant_uow:
        async with tenant_uow:
            await tenant_uow.users.create(
                TenantUser(
                    name="Admin",
                    email="admin@race.test",
                    password_hash=bcrypt.hashpw(b"secret1", bcrypt.gensalt(4)).decode(),
                )
            )
            await tenant_uow.commit()

    job_id = await provisioner.dispatch_seeding("race", "admin@race.test")

    assert (await job_queue.get_job(job_id)).result["admin_role_assigned"] is True
    async with tenancy.run("race") as tenant_uow:
        async with tenant_uow:
            user = await tenant_uow.users.get_by_email("admin@race.test")
            roles = await tenant_uow.roles.get_roles_for_user(user.id)
            assert [r.name for r in roles] == ["super_admin"]


@pytest.mark.asyncio
async def test_seed_unknown_tenant(client):
    response = await client.post("/admin/tenants/missing/seed", headers=ADMIN_HEADERS)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_job_status_endpoint(client, create_tenant):
    body = await create_tenant()

    response = await client.get(f"/admin/jobs/{body['seeding_job_id']}", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert response.json()["name"] == "SeedTenantPermissionsJob"
    assert response.json()["status"] == "completed"
    assert response.json()["metadata"] == {"tenant_id": body["tenant"]["id"]}

    response = await client.get("/admin/jobs/unknown", headers=ADMIN_HEADERS)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_async_seeding_runs_on_separate_worker(
    tenancy, cache, registrar, registry, central_uow_factory
):
    """API process only queues; a worker sharing the storage seeds and grants the role"""
    from src.adapter.services.job_queue import AsyncJobQueue, InMemoryQueueStorage
    from src.app.use_cases.tenants import CreateTenantCommand, CreateTenantUseCase

    storage = InMemoryQueueStorage()
    api_queue = AsyncJobQueue(cache, storage, mode="async", default_tries=1, default_backoff=0)
    worker_queue = AsyncJobQueue(cache, storage, mode="async", default_tries=1, default_backoff=0)
    api_provisioner = TenantProvisioner(
        tenancy, api_queue, registry, registrar, central_uow_factory
    )
    TenantProvisioner(tenancy, worker_queue, registry, registrar, central_uow_factory)

    async with central_uow_factory() as uow:
        result = await CreateTenantUseCase(uow, tenancy, api_provisioner, bcrypt_rounds=4).execute(
            CreateTenantCommand(
                domain="acme.example.test",
                email="admin@acme.test",
                admin_password="secret1",
                name="Acme",
            )
        )

    assert result.is_ok()
    created = result.value
    assert created.admin_role_assigned is False
    assert (await api_queue.get_job(created.seeding_job_id)).status.value == "queued"

    assert await worker_queue.work_once() is True

    record = await api_queue.get_job(created.seeding_job_id)
    assert record.status.value == "completed"
    assert record.result["admin_role_assigned"] is True
    async with tenancy.run(created.tenant.id) as tenant_uow:
        async with tenant_uow:
            user = await tenant_uow.users.get_by_email("admin@acme.test")
            roles = await tenant_uow.roles.get_roles_for_user(user.id)
            assert [r.name for r in roles] == ["super_admin"]
