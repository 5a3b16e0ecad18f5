"""Resolve the owning company (tenant) of an entity being audited.

Strategies run in a fixed order and the first hit wins:

1. the entity is the tenant root (a Company): its own id;
2. a loaded ``company``/``tenant`` reference on the entity;
3. a loaded reference whose own company reference or company id column is set
   (emission point -> establishment -> company);
4. a raw id column (``company_id``, ``companyId``, ``tenant_id``, ``tenantId``);
5. any field whose name mentions company/tenant.

Only loaded state is read, so resolving never hits the database.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from app.domain.enums import TENANT_ROOT_KIND, AuditableKind
from app.infrastructure.audit.kinds import audit_kind_of
from app.infrastructure.audit.snapshot import instance_state, loaded_id

REFERENCE_NAMES = ("company", "tenant")
ID_COLUMN_NAMES = ("company_id", "companyId", "tenant_id", "tenantId")
SCAN_MARKERS = ("company", "tenant")


def _fields(entity: Any) -> Mapping[str, Any]:
    if entity is None:
        return {}
    if isinstance(entity, Mapping):
        return entity
    state = instance_state(entity)
    if state is not None:
        # Column attributes first, then relationships, in mapper order.
        ordered = [a.key for a in state.mapper.column_attrs]
        ordered += [r.key for r in state.mapper.relationships]
        return {key: state.dict[key] for key in ordered if key in state.dict}
    return vars(entity) if hasattr(entity, "__dict__") else {}


def _reference_id(value: Any) -> str | None:
    """Id carried by a reference value (mapped instance, mapping, or object)."""
    if value is None or isinstance(value, str | int | float | bool):
        return None
    if isinstance(value, Mapping):
        ref = value.get("id")
    elif instance_state(value) is not None:
        ref = loaded_id(value)
    else:
        ref = getattr(value, "id", None)
    return _as_id(ref)


def _as_id(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, int):
        return str(value)
    return None


def _is_reference(value: Any) -> bool:
    return value is not None and not isinstance(
        value, str | int | float | bool | list | tuple | set
    )


class TenantResolver:
    """Finds the company id that owns an entity; None when nothing matches."""

    def __init__(
        self, kind_of: Callable[[Any], AuditableKind | None] = audit_kind_of
    ) -> None:
        self._kind_of = kind_of

    def resolve(self, entity: Any) -> str | None:
        """Return the owning company id of entity, or None."""
        if entity is None:
            return None
        fields = _fields(entity)
        for strategy in (
            self._from_tenant_root,
            self._from_direct_reference,
            self._from_nested_reference,
            self._from_id_column,
            self._from_field_scan,
        ):
            tenant_id = strategy(entity, fields)
            if tenant_id is not None:
                return tenant_id
        return None

    def resolve_for_update(self, after: Any, before: Any = None) -> str | None:
        """Resolve from the post-update state, falling back to the pre-update one."""
        return self.resolve(after) or self.resolve(before)

    def _from_tenant_root(self, entity: Any, fields: Mapping[str, Any]) -> str | None:
        if self._kind_of(entity) is not TENANT_ROOT_KIND:
            return None
        return _as_id(fields.get("id"))

    def _from_direct_reference(
        self, entity: Any, fields: Mapping[str, Any]
    ) -> str | None:
        for name in REFERENCE_NAMES:
            tenant_id = _reference_id(fields.get(name))
            if tenant_id is not None:
                return tenant_id
        return None

    def _from_nested_reference(
        self, entity: Any, fields: Mapping[str, Any]
    ) -> str | None:
        for name, value in fields.items():
            if name in REFERENCE_NAMES or not _is_reference(value):
                continue
            parent = _fields(value)
            for ref_name in REFERENCE_NAMES:
                tenant_id = _reference_id(parent.get(ref_name))
                if tenant_id is not None:
                    return tenant_id
            for column in ID_COLUMN_NAMES:
                tenant_id = _as_id(parent.get(column))
                if tenant_id is not None:
                    return tenant_id
        return None

    def _from_id_column(self, entity: Any, fields: Mapping[str, Any]) -> str | None:
        for name in ID_COLUMN_NAMES:
            tenant_id = _as_id(fields.get(name))
            if tenant_id is not None:
                return tenant_id
        return None

    def _from_field_scan(self, entity: Any, fields: Mapping[str, Any]) -> str | None:
        for name, value in fields.items():
            lowered = name.lower()
            if not any(marker in lowered for marker in SCAN_MARKERS):
                continue
            tenant_id = _reference_id(value) or _as_id(value)
            if tenant_id is not None:
                return tenant_id
        return None
