"""Domain enumerations for the backend.

Enums represent fixed sets of domain values (e.g. which entity kinds are
audited).
"""

from enum import Enum


class AuditableKind(str, Enum):
    """Closed set of entity kinds whose mutations produce audit records.

    The value is the entity name persisted on the record. The audit record
    kind itself is not a member, so audit writes are never audited.
    """

    COMPANY = "Company"
    ESTABLISHMENT = "Establishment"
    EMISSION_POINT = "EmissionPoint"
    WAREHOUSE = "Warehouse"
    USER = "User"
    TAX = "Tax"
    CONTACT = "Contact"


# Kind whose own id is the tenant id (the multi-tenant boundary).
TENANT_ROOT_KIND = AuditableKind.COMPANY
