"""
Unit tests for DeleteTenantUseCase

Tests business logic in isolation with mocked repositories.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.tenants.delete_tenant_use_case import DeleteTenantUseCase
from src.domain.entities import Tenant
from src.domain.exceptions import TenancyError


@pytest.fixture
def provisioner():
    provisioner = MagicMock()
    provisioner.deprovision = AsyncMock()
    return provisioner


@pytest.mark.asyncio
async def test_successful_tenant_deletion(mock_uow, provisioner):
    """Test successful tenant deletion"""
    # Arrange
    tenant = Tenant(id="t1", name="Acme Corp")
    mock_uow.tenants.get_by_id = AsyncMock(return_value=tenant)
    mock_uow.tenants.delete = AsyncMock()
    mock_uow.domains.delete_for_tenant = AsyncMock(return_value=1)
    mock_uow.audit_events.create = AsyncMock()

    # Act
    result = await DeleteTenantUseCase(mock_uow, provisioner).execute("t1")

    # Assert
    assert result.is_ok()
    assert result.value.status == "deleted"
    assert result.value.domains_deleted == 1
    mock_uow.domains.delete_for_tenant.assert_awaited_once_with("t1")
    mock_uow.tenants.delete.assert_awaited_once_with(tenant)
    mock_uow.commit.assert_awaited_once()
    provisioner.deprovision.assert_awaited_once_with("t1")

    audit_event = mock_uow.audit_events.create.call_args.args[0]
    assert audit_event.action == "tenant_deleted"
    assert audit_event.tenant_id == "t1"


@pytest.mark.asyncio
async def test_tenant_not_found(mock_uow, provisioner):
    mock_uow.tenants.get_by_id = AsyncMock(return_value=None)

    result = await DeleteTenantUseCase(mock_uow, provisioner).execute("missing")

    assert result.is_err()
    assert result.error.code == "TENANT_NOT_FOUND"
    provisioner.deprovision.assert_not_awaited()


@pytest.mark.asyncio
async def test_database_drop_failure(mock_uow, provisioner):
    mock_uow.tenants.get_by_id = AsyncMock(return_value=Tenant(id="t1", name="Acme"))
    mock_uow.tenants.delete = AsyncMock()
    mock_uow.domains.delete_for_tenant = AsyncMock(return_value=0)
    mock_uow.audit_events.create = AsyncMock()
    provisioner.deprovision = AsyncMock(side_effect=TenancyError("t1", "in use"))

    result = await DeleteTenantUseCase(mock_uow, provisioner).execute("t1")

    assert result.is_err()
    assert result.error.code == "TENANT_DEPROVISIONING_FAILED"
    mock_uow.commit.assert_awaited_once()
