"""Application interfaces (ports): repository protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    IAuditLogRepository,
    IAuditLogStore,
    ITenantTimezoneLookup,
)

__all__ = [
    "IAuditLogRepository",
    "IAuditLogStore",
    "ITenantTimezoneLookup",
]
