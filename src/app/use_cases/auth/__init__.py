"""
Authentication Use Cases

Tenant panel login.
"""

from .dtos import TenantLoginResponse
from .tenant_login_use_case import TenantLoginUseCase

__all__ = [
    "TenantLoginUseCase",
    "TenantLoginResponse",
]
