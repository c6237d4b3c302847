"""
Audit Use Cases

All audit-related business logic.
"""

from .get_activity_log_use_case import (
    ActivityLogEntry,
    ActivityLogResponse,
    GetActivityLogUseCase,
)

__all__ = [
    "GetActivityLogUseCase",
    "ActivityLogEntry",
    "ActivityLogResponse",
]
