"""Application DTOs (no ORM dependency)."""

from app.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogPage,
    AuditLogResult,
    PerformedByUser,
)

__all__ = [
    "AuditLogEntryCreate",
    "AuditLogPage",
    "AuditLogResult",
    "PerformedByUser",
]
