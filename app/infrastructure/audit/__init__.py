"""Change interception: SQLAlchemy mapper events to audit log entries."""

from app.infrastructure.audit.interceptor import AuditSink, ChangeInterceptor
from app.infrastructure.audit.kinds import AUDITED_MODELS, audit_kind_of
from app.infrastructure.audit.listeners import AuditEventBridge
from app.infrastructure.audit.tenant_resolver import TenantResolver

__all__ = [
    "AUDITED_MODELS",
    "AuditEventBridge",
    "AuditSink",
    "ChangeInterceptor",
    "TenantResolver",
    "audit_kind_of",
]
