"""
Domain Exceptions

Raised by infrastructure services; use cases translate the expected ones
into Result errors.
"""


class TenancyError(Exception):
    """Tenant database could not be created, migrated, reached or dropped"""

    def __init__(self, tenant_id: str, message: str):
        self.tenant_id = tenant_id
        super().__init__(f"[{tenant_id}] {message}")


class PermissionRegistryError(Exception):
    """A registered resource, page or widget yields an invalid permission"""


class SeedingFailedError(Exception):
    """Neither the full nor the fallback permission baseline could be written"""

    def __init__(self, tenant_id: str, code: str, message: str):
        self.tenant_id = tenant_id
        self.code = code
        super().__init__(f"[{tenant_id}] {code}: {message}")
