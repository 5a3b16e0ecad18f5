"""Audit log repository. Append-only; implements IAuditLogRepository."""

from __future__ import annotations

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogResult,
    PerformedByUser,
)
from app.infrastructure.persistence.models.audit_log import AuditLog
from app.shared.utils.generators import generate_cuid


def _orm_to_result(row: AuditLog) -> AuditLogResult:
    """Map ORM to application DTO (performed_by_user only when loaded)."""
    performed_by_user = None
    if "performed_by_user" not in sa_inspect(row).unloaded:
        user = row.performed_by_user
        if user is not None:
            performed_by_user = PerformedByUser(
                id=user.id, full_name=user.full_name, email=user.email
            )
    return AuditLogResult(
        id=row.id,
        entity_name=row.entity_name,
        entity_id=row.entity_id,
        company_id=row.company_id,
        action=row.action,
        performed_by=row.performed_by,
        old_values=row.old_values,
        new_values=row.new_values,
        created_at=row.created_at,
        performed_by_user=performed_by_user,
    )


class AuditLogRepository:
    """Append-only audit log repository. No update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry; return created record."""
        row = AuditLog(
            id=generate_cuid(),
            entity_name=entry.entity_name,
            entity_id=entry.entity_id,
            company_id=entry.company_id,
            action=entry.action,
            performed_by=entry.performed_by,
            old_values=entry.old_values,
            new_values=entry.new_values,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row, attribute_names=["created_at"])
        return _orm_to_result(row)

    async def list(
        self,
        company_id: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[AuditLogResult]:
        """List audit log entries (newest first), optionally for one company."""
        stmt = (
            select(AuditLog)
            .options(selectinload(AuditLog.performed_by_user))
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset(skip)
            .limit(limit)
        )
        if company_id is not None:
            stmt = stmt.where(AuditLog.company_id == company_id)
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def count(self, company_id: str | None = None) -> int:
        """Count audit log entries, optionally for one company."""
        stmt = select(func.count()).select_from(AuditLog)
        if company_id is not None:
            stmt = stmt.where(AuditLog.company_id == company_id)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def get_by_id(self, audit_log_id: str) -> AuditLogResult | None:
        """Return one entry with its performing user, or None."""
        stmt = (
            select(AuditLog)
            .options(selectinload(AuditLog.performed_by_user))
            .where(AuditLog.id == audit_log_id)
        )
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return _orm_to_result(row) if row is not None else None
