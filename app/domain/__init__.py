"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import TENANT_ROOT_KIND, AuditableKind
from app.domain.exceptions import (
    AppException,
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)

__all__ = [
    # Enums
    "AuditableKind",
    "TENANT_ROOT_KIND",
    # Exceptions
    "AppException",
    "AuthenticationException",
    "AuthorizationException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "ValidationException",
]
