"""
Unit tests for tenant identification, domain validation and queries
"""

import pytest
from unittest.mock import AsyncMock

from src.app.use_cases.tenants import (
    GetTenantUseCase,
    IdentifyTenantUseCase,
    ListTenantsUseCase,
    ValidateTenantDomainUseCase,
    host_to_domain,
)
from src.domain.entities import Domain, Tenant, TenantStatus


@pytest.mark.parametrize(
    "host,expected",
    [
        ("Acme.Example.Test", "acme.example.test"),
        ("acme.example.test:8000", "acme.example.test"),
        ("", ""),
        (None, ""),
    ],
)
def test_host_to_domain(host, expected):
    assert host_to_domain(host) == expected


@pytest.mark.asyncio
async def test_identify_active_tenant(mock_uow):
    mock_uow.domains.get_by_domain = AsyncMock(
        return_value=Domain(domain="acme.test", tenant_id="t1")
    )
    mock_uow.tenants.get_by_id = AsyncMock(return_value=Tenant(id="t1", name="Acme"))

    result = await IdentifyTenantUseCase(mock_uow).execute("acme.test:8000")

    assert result.is_ok()
    assert result.value.id == "t1"
    mock_uow.domains.get_by_domain.assert_awaited_once_with("acme.test")


@pytest.mark.asyncio
async def test_identify_unknown_host(mock_uow):
    mock_uow.domains.get_by_domain = AsyncMock(return_value=None)

    result = await IdentifyTenantUseCase(mock_uow).execute("nowhere.test")

    assert result.is_err()
    assert result.error.code == "TENANT_NOT_IDENTIFIED"


@pytest.mark.asyncio
async def test_identify_inactive_tenant(mock_uow):
    mock_uow.domains.get_by_domain = AsyncMock(
        return_value=Domain(domain="acme.test", tenant_id="t1")
    )
    mock_uow.tenants.get_by_id = AsyncMock(
        return_value=Tenant(id="t1", status=TenantStatus.suspended)
    )

    result = await IdentifyTenantUseCase(mock_uow).execute("acme.test")

    assert result.is_err()
    assert result.error.code == "TENANT_INACTIVE"


@pytest.mark.asyncio
async def test_validate_domain_taken_by_other_tenant(mock_uow):
    mock_uow.domains.get_by_domain = AsyncMock(
        return_value=Domain(domain="acme.test", tenant_id="t2")
    )

    result = await ValidateTenantDomainUseCase(mock_uow).execute("ACME.test", tenant_id="t1")

    assert result.is_err()
    assert result.error.code == "DOMAIN_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_validate_domain_ignores_own_binding(mock_uow):
    mock_uow.domains.get_by_domain = AsyncMock(
        return_value=Domain(domain="acme.test", tenant_id="t1")
    )

    result = await ValidateTenantDomainUseCase(mock_uow).execute("acme.test", tenant_id="t1")

    assert result.is_ok()
    assert result.value == "acme.test"


@pytest.mark.asyncio
async def test_validate_domain_required(mock_uow):
    result = await ValidateTenantDomainUseCase(mock_uow).execute("  ")

    assert result.is_err()
    assert result.error.code == "DOMAIN_REQUIRED"


@pytest.mark.asyncio
async def test_get_tenant_not_found(mock_uow):
    mock_uow.tenants.get_by_id = AsyncMock(return_value=None)

    result = await GetTenantUseCase(mock_uow).execute("missing")

    assert result.is_err()
    assert result.error.code == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_list_tenants_with_domains(mock_uow):
    tenants = [Tenant(id="t1", name="Acme"), Tenant(id="t2", name="Globex")]
    mock_uow.tenants.list = AsyncMock(return_value=tenants)
    mock_uow.domains.get_current_for_tenants = AsyncMock(return_value={"t1": "acme.test"})

    result = await ListTenantsUseCase(mock_uow).execute(limit=10)

    assert result.is_ok()
    assert [(t.id, t.domain) for t in result.value.tenants] == [
        ("t1", "acme.test"),
        ("t2", None),
    ]


@pytest.mark.asyncio
async def test_list_tenants_invalid_limit(mock_uow):
    result = await ListTenantsUseCase(mock_uow).execute(limit=0)

    assert result.is_err()
    assert result.error.code == "INVALID_LIMIT"
