"""Read-only table of ORM classes whose changes are audited."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from app.domain.enums import AuditableKind
from app.infrastructure.persistence.models import (
    Company,
    Contact,
    EmissionPoint,
    Establishment,
    Tax,
    User,
    Warehouse,
)

# AuditLog and SystemSetting are deliberately absent.
AUDITED_MODELS: Mapping[type, AuditableKind] = MappingProxyType({
    Company: AuditableKind.COMPANY,
    Establishment: AuditableKind.ESTABLISHMENT,
    EmissionPoint: AuditableKind.EMISSION_POINT,
    Warehouse: AuditableKind.WAREHOUSE,
    User: AuditableKind.USER,
    Tax: AuditableKind.TAX,
    Contact: AuditableKind.CONTACT,
})


def audit_kind_of(entity: Any) -> AuditableKind | None:
    """Return the auditable kind of an entity instance, or None."""
    if entity is None:
        return None
    for cls in type(entity).__mro__:
        kind = AUDITED_MODELS.get(cls)
        if kind is not None:
            return kind
    return None
