"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the audit log query service,
and the admin guard for audit routes. Routes depend only on these, not on
infrastructure directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.domain.exceptions import AuthenticationException, AuthorizationException
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import AuditLogRepository
from app.infrastructure.services.audit_log_query_service import AuditLogQueryService
from app.shared.context import ActorContext, get_actor_context


async def get_audit_log_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuditLogRepository:
    """Audit log repository for reads. Writes go through the audit writer."""
    return AuditLogRepository(db)


async def get_audit_log_query_service(
    repo: Annotated[AuditLogRepository, Depends(get_audit_log_repo)],
) -> AuditLogQueryService:
    return AuditLogQueryService(repo)


async def get_current_actor() -> ActorContext:
    """Return the authenticated actor set by ActorContextMiddleware; 401 if none."""
    actor = get_actor_context()
    if actor.user_id is None:
        raise AuthenticationException("Not authenticated")
    return actor


async def require_audit_admin(
    actor: Annotated[ActorContext, Depends(get_current_actor)],
) -> ActorContext:
    """Allow super admins and the configured admin roles (default owner, admin)."""
    if actor.is_super_admin:
        return actor
    role = (actor.role or "").lower()
    if role not in get_settings().audit_admin_role_set:
        raise AuthorizationException("audit_log", "read")
    return actor
