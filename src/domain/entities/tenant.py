"""
Tenant Entity

An isolated customer account with its own database and domain.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Text
from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import generate_tenant_id, utcnow
from .enums import TenantStatus


class Tenant(SQLModel, table=True):
    """
    Tenant entity - lives in the central database.

    Business Rules:
    - Owns an isolated database, created on creation and dropped on deletion
    - Owns zero-or-one domain binding (see Domain)
    - email is the login of the tenant's first administrator
    - Only active tenants can be reached through the tenant panel
    """

    __tablename__ = "tenants"

    id: str = Field(default_factory=generate_tenant_id, primary_key=True, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, sa_column=Column(Text))

    status: TenantStatus = Field(default=TenantStatus.active)

    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    data: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_tenant_status", "status"),)
