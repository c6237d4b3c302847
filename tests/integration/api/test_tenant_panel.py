"""
Integration tests for the tenant panel

Requests are routed to a tenant by their Host header.
"""

import pytest

from config import ApplicationConfig
from src.api.utils.jwt import generate_jwt

ADMIN_HEADERS = {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}
ACME = {"host": "acme.example.test"}


async def login(client, host=ACME, email="admin@acme.test", password="secret1"):
    response = await client.post(
        "/tenant/auth/login", json={"email": email, "password": password}, headers=host
    )
    return response


async def auth_headers(client, host=ACME, **credentials):
    response = await login(client, host, **credentials)
    assert response.status_code == 200, response.text
    return {**host, "Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.mark.asyncio
async def test_current_tenant_by_host(client, create_tenant):
    body = await create_tenant()

    response = await client.get("/tenant", headers={"host": "ACME.example.test:8000"})

    assert response.status_code == 200
    assert response.json()["id"] == body["tenant"]["id"]
    assert response.json()["domain"] == "acme.example.test"


@pytest.mark.asyncio
async def test_unknown_host(client, create_tenant):
    await create_tenant()

    response = await client.get("/tenant", headers={"host": "nowhere.test"})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TENANT_NOT_IDENTIFIED"


@pytest.mark.asyncio
async def test_inactive_tenant(client, create_tenant):
    await create_tenant(status="inactive")

    response = await client.get("/tenant", headers=ACME)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "TENANT_INACTIVE"


@pytest.mark.asyncio
async def test_admin_login(client, create_tenant):
    body = await create_tenant()

    response = await login(client)

    assert response.status_code == 200
    assert response.json()["tenant_id"] == body["tenant"]["id"]
    assert response.json()["roles"] == ["super_admin"]


@pytest.mark.asyncio
async def test_login_wrong_password(client, create_tenant):
    await create_tenant()

    response = await login(client, password="wrong-password")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_admin_manages_users(client, create_tenant):
    await create_tenant()
    headers = await auth_headers(client)

    response = await client.post(
        "/tenant/users",
        json={"name": "Jane", "email": "jane@acme.test", "password": "secret1"},
        headers=headers,
    )
    assert response.status_code == 201
    jane_id = response.json()["id"]
    assert response.json()["roles"] == []

    # no role, no panel
    response = await login(client, email="jane@acme.test")
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "NO_PANEL_ACCESS"

    response = await client.put(
        f"/tenant/users/{jane_id}/roles", json={"roles": ["super_admin"]}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["roles"] == ["super_admin"]

    response = await login(client, email="jane@acme.test")
    assert response.status_code == 200

    response = await client.get("/tenant/users", headers=headers)
    assert response.status_code == 200
    assert sorted(u["email"] for u in response.json()["users"]) == [
        "admin@acme.test",
        "jane@acme.test",
    ]


@pytest.mark.asyncio
async def test_create_user_errors(client, create_tenant):
    await create_tenant()
    headers = await auth_headers(client)

    response = await client.post(
        "/tenant/users",
        json={"name": "Dup", "email": "ADMIN@acme.test", "password": "secret1"},
        headers=headers,
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"

    response = await client.post(
        "/tenant/users",
        json={"name": "Jane", "email": "jane@acme.test", "password": "secret1", "roles": ["wizard"]},
        headers=headers,
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "ROLE_NOT_FOUND"


@pytest.mark.asyncio
async def test_sync_roles_unknown_user(client, create_tenant):
    await create_tenant()
    headers = await auth_headers(client)

    response = await client.put(
        "/tenant/users/00000000-0000-0000-0000-000000000000/roles",
        json={"roles": []},
        headers=headers,
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_token_from_other_tenant_is_rejected(client, create_tenant):
    await create_tenant(domain="acme.example.test", email="admin@acme.test")
    await create_tenant(domain="globex.example.test", email="admin@globex.test")
    acme_headers = await auth_headers(client)

    response = await client.get(
        "/tenant/users",
        headers={"host": "globex.example.test", "Authorization": acme_headers["Authorization"]},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "TENANT_MISMATCH"


@pytest.mark.asyncio
async def test_missing_permission(client, create_tenant, tenancy):
    body = await create_tenant()
    tenant_id = body["tenant"]["id"]
    admin_headers = await auth_headers(client)

    async with tenancy.run(tenant_id) as tenant_uow:
        async with tenant_uow:
            viewer = await tenant_uow.roles.first_or_create("viewer", "tenant")
            permission = await tenant_uow.permissions.first_or_create("view_any_user", "tenant")
            await tenant_uow.roles.sync_permissions(viewer, [permission])
            await tenant_uow.commit()

    response = await client.post(
        "/tenant/users",
        json={"name": "Vic", "email": "vic@acme.test", "password": "secret1", "roles": ["viewer"]},
        headers=admin_headers,
    )
    assert response.status_code == 201
    viewer_headers = await auth_headers(client, email="vic@acme.test")

    response = await client.get("/tenant/users", headers=viewer_headers)
    assert response.status_code == 200

    response = await client.post(
        "/tenant/users",
        json={"name": "Eve", "email": "eve@acme.test", "password": "secret1"},
        headers=viewer_headers,
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PERMISSION_DENIED"


@pytest.mark.asyncio
async def test_requests_without_valid_token(client, create_tenant):
    body = await create_tenant()

    response = await client.get("/tenant/users", headers=ACME)
    assert response.status_code == 401

    forged = generate_jwt(
        user_id="00000000-0000-0000-0000-000000000000",
        tenant_id=body["tenant"]["id"],
        roles=["super_admin"],
        guard="tenant",
    )
    response = await client.get(
        "/tenant/users", headers={**ACME, "Authorization": f"Bearer {forged}"}
    )
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_login_email_is_case_insensitive(client, create_tenant):
    await create_tenant()

    response = await login(client, email="Admin@ACME.test")

    assert response.status_code == 200, response.text
    assert response.json()["roles"] == ["super_admin"]
