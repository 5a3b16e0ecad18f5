"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.audit_log import AuditLogEntryCreate, AuditLogResult


class IAuditLogStore(Protocol):
    """Sink for finished audit records (used by the background writer)."""

    async def append(self, entry: AuditLogEntryCreate, timezone: str) -> None:
        """Persist one audit record in its own transaction."""


class IAuditLogRepository(Protocol):
    """Protocol for audit log reads (query service)."""

    async def list(
        self, company_id: str | None = None, skip: int = 0, limit: int = 20
    ) -> list[AuditLogResult]:
        """Return audit records newest first, optionally for one company."""

    async def count(self, company_id: str | None = None) -> int:
        """Return number of audit records, optionally for one company."""

    async def get_by_id(self, audit_log_id: str) -> AuditLogResult | None:
        """Return one audit record by id."""


class ITenantTimezoneLookup(Protocol):
    """Reads a tenant's configured timezone name (raw, unvalidated)."""

    async def get_timezone_value(self, company_id: str) -> str | None:
        """Return the stored timezone for company, or None if unset."""
