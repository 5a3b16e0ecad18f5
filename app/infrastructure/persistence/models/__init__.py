"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.audit_log import AuditLog
from app.infrastructure.persistence.models.company import Company
from app.infrastructure.persistence.models.contact import Contact
from app.infrastructure.persistence.models.emission_point import EmissionPoint
from app.infrastructure.persistence.models.establishment import Establishment
from app.infrastructure.persistence.models.mixins import (
    CompanyScopedMixin,
    CompanyScopedModel,
    CuidMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.system_setting import (
    SYSTEM_TIMEZONE_KEY,
    SystemSetting,
)
from app.infrastructure.persistence.models.tax import Tax
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.models.warehouse import Warehouse

__all__ = [
    "AuditLog",
    "Company",
    "CompanyScopedMixin",
    "CompanyScopedModel",
    "Contact",
    "CuidMixin",
    "EmissionPoint",
    "Establishment",
    "SYSTEM_TIMEZONE_KEY",
    "SystemSetting",
    "Tax",
    "TimestampMixin",
    "User",
    "Warehouse",
]
