"""
AuditEvent Entity

Immutable activity log of operator and system actions on tenants.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - activity log kept in the central database.

    Business Rules:
    - Immutable (never updated)
    - tenant_id is not a foreign key: events outlive deleted tenants
    - Metadata stores the action context (domains, seeding mode, ...)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: Optional[str] = Field(default=None, index=True, max_length=255)

    action: str = Field(max_length=100)  # e.g., "tenant_created"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_tenant_action", "tenant_id", "action"),
    )
