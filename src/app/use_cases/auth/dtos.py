"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for tenant panel auth.
"""

from typing import List

from pydantic import BaseModel


class TenantLoginResponse(BaseModel):
    """Response for tenant panel login use case"""

    access_token: str
    token_type: str = "bearer"
    user_id: str
    tenant_id: str
    roles: List[str]
