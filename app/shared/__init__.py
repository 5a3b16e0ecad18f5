"""Shared utilities: context, enums, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.context import (
    ActorContext,
    actor_scope,
    get_actor_context,
    get_current_actor_id,
)
from app.shared.enums import ActorType, AuditAction
from app.shared.utils import (
    ensure_utc,
    generate_cuid,
    to_utc_iso_seconds,
)

__all__ = [
    "actor_scope",
    "get_current_actor_id",
    "get_actor_context",
    "ActorContext",
    "ActorType",
    "AuditAction",
    "generate_cuid",
    "ensure_utc",
    "to_utc_iso_seconds",
]
