"""
Domain Entity

Hostname bound to exactly one tenant.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class Domain(SQLModel, table=True):
    """
    Domain entity - hostname binding used to identify a tenant per request.

    Business Rules:
    - domain is stored trimmed and lower-cased
    - domain is unique across all tenants
    """

    __tablename__ = "domains"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    domain: str = Field(unique=True, index=True, max_length=255)
    tenant_id: str = Field(foreign_key="tenants.id", nullable=False, index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
