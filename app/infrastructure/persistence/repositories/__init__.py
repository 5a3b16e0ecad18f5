"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.audit_log_repo import (
    AuditLogRepository,
)
from app.infrastructure.persistence.repositories.system_setting_repo import (
    SystemSettingRepository,
)

__all__ = [
    "AuditLogRepository",
    "SystemSettingRepository",
]
