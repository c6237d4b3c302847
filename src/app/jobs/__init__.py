"""
Background Jobs

Jobs dispatched through the JobQueue.
"""

from .seed_tenant_permissions import SeedTenantPermissionsJob

__all__ = ["SeedTenantPermissionsJob"]
