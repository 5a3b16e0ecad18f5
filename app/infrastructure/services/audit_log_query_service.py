"""Audit log query service: paginated, company-scoped reads of the audit trail."""

from __future__ import annotations

import re

from app.application.dtos.audit_log import AuditLogPage, AuditLogResult
from app.application.interfaces.repositories import IAuditLogRepository
from app.domain.exceptions import ResourceNotFoundException, ValidationException

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int_param(raw: str | None) -> int | None:
    """Leading integer of a query value ("3", " 3 ", "3abc").

    None when there is none or it is zero, so the caller uses its default.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    return (int(match.group(1)) or None) if match else None


def clamp_page(page: int | None) -> int:
    """Page number floored to 1."""
    return max(1, page or 1)


def clamp_page_size(page_size: int | None) -> int:
    """Page size clamped to [1, MAX_PAGE_SIZE]; missing means the default."""
    if page_size is None:
        return DEFAULT_PAGE_SIZE
    return min(max(1, page_size), MAX_PAGE_SIZE)


class AuditLogQueryService:
    """Read side of the audit trail. Records come back newest first."""

    def __init__(self, repo: IAuditLogRepository) -> None:
        self._repo = repo

    async def list(
        self,
        company_id: str | None = None,
        page: int | None = 1,
        page_size: int | None = DEFAULT_PAGE_SIZE,
    ) -> AuditLogPage:
        """Return one page of records, for one company or for all of them."""
        page = clamp_page(page)
        limit = clamp_page_size(page_size)
        company_id = company_id or None
        items = await self._repo.list(
            company_id=company_id, skip=(page - 1) * limit, limit=limit
        )
        total = await self._repo.count(company_id=company_id)
        return AuditLogPage(items=items, total=total, page=page, limit=limit)

    async def list_by_company(
        self,
        company_id: str,
        page: int | None = 1,
        page_size: int | None = DEFAULT_PAGE_SIZE,
    ) -> AuditLogPage:
        """Return one page of a company's records.

        Raises:
            ValidationException: If company_id is blank.
        """
        if not company_id or not company_id.strip():
            raise ValidationException("companyId is required", field="company_id")
        return await self.list(company_id.strip(), page, page_size)

    async def find_one(self, audit_log_id: str) -> AuditLogResult:
        """Return one record.

        Raises:
            ResourceNotFoundException: If no record has this id.
        """
        record = await self._repo.get_by_id(audit_log_id)
        if record is None:
            raise ResourceNotFoundException("audit_log", audit_log_id)
        return record
