"""DTOs for audit log (entity change trail)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Input for appending one audit log record. Append-only; no update.

    old_values/new_values hold sanitized snapshots; datetimes may still be
    datetime objects here and are localized by the writer before insert.
    """

    entity_name: str
    entity_id: str
    company_id: str | None
    action: str
    performed_by: str | None
    old_values: dict[str, Any] | None
    new_values: dict[str, Any] | None


@dataclass(frozen=True)
class PerformedByUser:
    """Public projection of the acting user (no credential fields)."""

    id: str
    full_name: str
    email: str


@dataclass(frozen=True)
class AuditLogResult:
    """Single audit log entry (read-model for list/get)."""

    id: str
    entity_name: str
    entity_id: str
    company_id: str | None
    action: str
    performed_by: str | None
    old_values: dict[str, Any] | None
    new_values: dict[str, Any] | None
    created_at: datetime
    performed_by_user: PerformedByUser | None = None


@dataclass(frozen=True)
class AuditLogPage:
    """One page of audit records, newest first."""

    items: list[AuditLogResult] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        """Number of pages for total/limit; at least 1."""
        if self.total <= 0 or self.limit <= 0:
            return 1
        return -(-self.total // self.limit)
