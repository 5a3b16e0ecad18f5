"""Shared enumerations for the backend.

Cross-cutting enums used by application and infrastructure (e.g. audit
action, actor type). Domain-specific enums (e.g. AuditableKind) live
in app.domain.enums.
"""

from enum import Enum


class ActorType(str, Enum):
    """Actor type for audit tracking (who performed the action)."""

    USER = "user"
    SYSTEM = "system"


class AuditAction(str, Enum):
    """Audit action persisted on every audit record."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
