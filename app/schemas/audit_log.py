"""Request/response schemas for audit log API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PerformedByUserResponse(BaseModel):
    """Acting user (public fields only)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str


class AuditLogEntryResponse(BaseModel):
    """Single audit log entry (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    entity_name: str
    entity_id: str
    company_id: str | None = None
    action: str
    performed_by: str | None = None
    performed_by_user: PerformedByUserResponse | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Audit log entries plus the total count across all pages."""

    data: list[AuditLogEntryResponse]
    total: int


class AuditLogCompanyListResponse(AuditLogListResponse):
    """Company audit log page with pagination metadata."""

    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages")
