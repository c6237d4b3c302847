from contextlib import asynccontextmanager

import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_tenant_uow():
    uow = MagicMock()
    uow.tenant_id = "acme"
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_tenancy(mock_tenant_uow):
    tenancy = MagicMock()
    tenancy.entered = []

    @asynccontextmanager
    async def run(tenant_id):
        tenancy.entered.append(tenant_id)
        yield mock_tenant_uow

    tenancy.run = run
    tenancy.database_exists = AsyncMock(return_value=True)
    return tenancy
