"""
Domain Entities

Central entities live in the central database; tenant entities are
replicated into every tenant database.
"""

# Export all enums
from .enums import SeedingMode, TenantStatus

# Export all entities
from .tenant import Tenant
from .domain import Domain
from .audit_event import AuditEvent
from .permission import Permission, Role, RoleHasPermission, UserHasRole
from .tenant_user import RoleAssignable, TenantUser

CENTRAL_TABLES = [
    Tenant.__table__,
    Domain.__table__,
    AuditEvent.__table__,
]

TENANT_TABLES = [
    TenantUser.__table__,
    Permission.__table__,
    Role.__table__,
    RoleHasPermission.__table__,
    UserHasRole.__table__,
]

__all__ = [
    # Enums
    "TenantStatus",
    "SeedingMode",
    # Entities
    "Tenant",
    "Domain",
    "AuditEvent",
    "TenantUser",
    "RoleAssignable",
    "Permission",
    "Role",
    "RoleHasPermission",
    "UserHasRole",
    # Table groups
    "CENTRAL_TABLES",
    "TENANT_TABLES",
]
