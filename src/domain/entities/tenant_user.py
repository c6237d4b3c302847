"""
TenantUser Entity

A user that lives inside one tenant's isolated database.
"""

from datetime import datetime
from typing import ClassVar, Protocol, runtime_checkable
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


@runtime_checkable
class RoleAssignable(Protocol):
    """Capability of holding roles under a guard"""

    id: UUID
    guard_name: ClassVar[str]


class TenantUser(SQLModel, table=True):
    """
    TenantUser entity - panel user of a single tenant.

    Business Rules:
    - Email unique within the tenant database, stored lower-case
    - Password stored as bcrypt hash
    - Roles are held through user_has_roles under the "tenant" guard
    - Only users holding at least one role may access the tenant panel
    """

    __tablename__ = "users"

    guard_name: ClassVar[str] = "tenant"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
