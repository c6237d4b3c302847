"""
Get Activity Log Use Case

Operator view of the tenant activity log, newest first, cursor-paginated.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

MAX_LIMIT = 100


class ActivityLogEntry(BaseModel):
    id: str
    tenant_id: Optional[str] = None
    action: str
    timestamp: str
    metadata: Dict[str, Any]


class ActivityLogResponse(BaseModel):
    events: List[ActivityLogEntry]
    next_cursor: Optional[str] = None


class GetActivityLogUseCase:
    """
    Use case for reading the activity log.

    Business Rules:
    - Optional filters: tenant_id, action
    - Results ordered by newest first
    - Supports cursor-based pagination; an unreadable cursor starts over
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        tenant_id: Optional[str] = None,
        action: Optional[str] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[ActivityLogResponse]:
        if limit < 1 or limit > MAX_LIMIT:
            return Return.err(
                Error("INVALID_LIMIT", f"Limit must be between 1 and {MAX_LIMIT}")
            )

        async with self.uow:
            events, next_cursor = await self.uow.audit_events.get_paginated(
                tenant_id=tenant_id, action=action, limit=limit, cursor=cursor
            )

            return Return.ok(
                ActivityLogResponse(
                    events=[
                        ActivityLogEntry(
                            id=str(event.id),
                            tenant_id=event.tenant_id,
                            action=event.action,
                            timestamp=event.created_at.isoformat() + "Z",
                            metadata=event.event_metadata or {},
                        )
                        for event in events
                    ],
                    next_cursor=next_cursor,
                )
            )
