"""Pydantic request/response schemas for the API."""

from app.schemas.audit_log import (
    AuditLogCompanyListResponse,
    AuditLogEntryResponse,
    AuditLogListResponse,
    PerformedByUserResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AuditLogCompanyListResponse",
    "AuditLogEntryResponse",
    "AuditLogListResponse",
    "HealthResponse",
    "PerformedByUserResponse",
]
