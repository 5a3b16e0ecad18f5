"""Change interceptor: turns entity create/update/delete into audit entries.

Runs inline inside the ORM flush, so it only does in-memory work (snapshot,
sanitize, diff, tenant/actor resolution) and hands the entry to a sink
without awaiting it. Nothing raised here may reach the business operation.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from app.application.dtos.audit_log import AuditLogEntryCreate
from app.application.services.audit_diff import diff, pick_old_values, sanitize
from app.domain.enums import AuditableKind
from app.infrastructure.audit.kinds import audit_kind_of
from app.infrastructure.audit.snapshot import entity_id_of, loaded_fields
from app.infrastructure.audit.tenant_resolver import TenantResolver
from app.shared.context import get_current_actor_id
from app.shared.enums import AuditAction
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class AuditSink(Protocol):
    """Non-blocking receiver of audit entries (AuditRecordWriter)."""

    def submit(self, entry: AuditLogEntryCreate) -> bool:
        """Queue entry for persistence; return False if it was dropped."""


class ChangeInterceptor:
    """Builds audit entries for auditable entities and submits them to a sink."""

    def __init__(
        self,
        sink: AuditSink,
        tenant_resolver: TenantResolver | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        self._sink = sink
        self._tenants = tenant_resolver or TenantResolver()
        self.enabled = enabled

    def is_auditable(self, entity: Any) -> bool:
        """True if entity's class maps to an AuditableKind."""
        return audit_kind_of(entity) is not None

    def created(self, entity: Any) -> None:
        """Record a CREATE with the sanitized new state."""
        kind = self._qualifies(entity)
        if kind is None:
            return
        try:
            self._submit(
                kind,
                entity,
                AuditAction.CREATE,
                company_id=self._tenants.resolve(entity),
                old_values=None,
                new_values=sanitize(loaded_fields(entity)),
            )
        except Exception as e:
            self._log_failure(kind, entity, AuditAction.CREATE, e)

    def updated(self, before: Mapping[str, Any] | Any, after: Any | None) -> None:
        """Record an UPDATE with only the changed fields; no record if nothing changed."""
        if after is None:
            logger.debug("Update event without an entity; nothing to audit")
            return
        kind = self._qualifies(after)
        if kind is None:
            return
        try:
            old_snapshot = sanitize(loaded_fields(before))
            new_snapshot = sanitize(loaded_fields(after))
            changed = diff(old_snapshot, new_snapshot)
            if changed is None:
                return
            company_id = self._tenants.resolve_for_update(after, before)
            if company_id is None:
                logger.warning(
                    "Could not resolve company for %s update (id=%s, fields=%s)",
                    kind.value,
                    entity_id_of(after),
                    sorted(new_snapshot or {}),
                )
            self._submit(
                kind,
                after,
                AuditAction.UPDATE,
                company_id=company_id,
                old_values=pick_old_values(old_snapshot, changed),
                new_values=changed,
            )
        except Exception as e:
            self._log_failure(kind, after, AuditAction.UPDATE, e)

    def deleting(self, entity: Any) -> None:
        """Record a DELETE with the sanitized state as it was before removal."""
        kind = self._qualifies(entity)
        if kind is None:
            return
        try:
            self._submit(
                kind,
                entity,
                AuditAction.DELETE,
                company_id=self._tenants.resolve(entity),
                old_values=sanitize(loaded_fields(entity)),
                new_values=None,
            )
        except Exception as e:
            self._log_failure(kind, entity, AuditAction.DELETE, e)

    def _qualifies(self, entity: Any) -> AuditableKind | None:
        if not self.enabled or entity is None:
            return None
        return audit_kind_of(entity)

    def _submit(
        self,
        kind: AuditableKind,
        entity: Any,
        action: AuditAction,
        *,
        company_id: str | None,
        old_values: dict[str, Any] | None,
        new_values: dict[str, Any] | None,
    ) -> None:
        entity_id = entity_id_of(entity)
        if entity_id is None:
            logger.warning("Skipping %s audit for %s without id", action.value, kind.value)
            return
        entry = AuditLogEntryCreate(
            entity_name=kind.value,
            entity_id=entity_id,
            company_id=company_id,
            action=action.value,
            performed_by=get_current_actor_id(),
            old_values=old_values,
            new_values=new_values,
        )
        if not self._sink.submit(entry):
            logger.warning(
                "Audit entry dropped for %s %s (%s)", kind.value, entity_id, action.value
            )

    def _log_failure(
        self, kind: AuditableKind, entity: Any, action: AuditAction, error: Exception
    ) -> None:
        try:
            entity_id = entity_id_of(entity)
        except Exception:
            entity_id = None
        logger.error(
            "Failed to build %s audit entry for %s %s: %s",
            action.value,
            kind.value,
            entity_id,
            error,
            exc_info=True,
        )
