"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant status"""

    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class SeedingMode(str, Enum):
    """How the permission baseline of a tenant was produced"""

    full = "full"
    fallback = "fallback"
