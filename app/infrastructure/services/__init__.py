"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.audit_log_query_service import AuditLogQueryService
from app.infrastructure.services.audit_record_writer import (
    AuditRecordWriter,
    AuditWriterStats,
    SqlAuditLogStore,
    SqlTenantTimezoneLookup,
)

__all__ = [
    "AuditLogQueryService",
    "AuditRecordWriter",
    "AuditWriterStats",
    "SqlAuditLogStore",
    "SqlTenantTimezoneLookup",
]
