"""Read entity state for auditing without triggering database loads.

Only attributes already present in the instance state are read; anything
expired or never loaded is left out of the snapshot. The one exception is
read_persisted_previous, which selects the old values of columns that were
assigned while expired.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Connection, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstanceState


def instance_state(entity: Any) -> InstanceState[Any] | None:
    """Return the SQLAlchemy instance state, or None for non-mapped objects."""
    if entity is None or isinstance(entity, Mapping | type):
        return None
    return sa_inspect(entity, raiseerr=False)


def loaded_id(entity: Any) -> Any:
    """Id of a mapped instance from loaded state or identity key, else None."""
    state = instance_state(entity)
    if state is None:
        return None
    value = state.dict.get("id")
    if value is None and state.identity:
        value = state.identity[0]
    return value


def _collapse_related(value: Any) -> Any:
    if isinstance(value, list | tuple | set):
        return [{"id": loaded_id(item)} for item in value]
    if instance_state(value) is not None:
        return {"id": loaded_id(value)}
    return value


def loaded_fields(entity: Any) -> dict[str, Any]:
    """Return the fields readable on entity without a database round trip.

    Mapped instances: loaded column attributes, then loaded relationships
    collapsed to ``{"id": ...}``. Mappings are copied; plain objects are
    read through ``vars()``.
    """
    if entity is None:
        return {}
    if isinstance(entity, Mapping):
        return dict(entity)
    state = instance_state(entity)
    if state is None:
        return dict(vars(entity)) if hasattr(entity, "__dict__") else {}
    loaded = state.dict
    fields: dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        if attr.key in loaded:
            fields[attr.key] = loaded[attr.key]
    for rel in state.mapper.relationships:
        if rel.key in loaded:
            fields[rel.key] = _collapse_related(loaded[rel.key])
    return fields


def _unloaded_changes(state: InstanceState[Any]) -> list[Any]:
    attrs = []
    for attr in state.mapper.column_attrs:
        if attr.key not in state.dict:
            continue
        history = state.attrs[attr.key].history
        if history.added and not history.deleted and not history.unchanged:
            attrs.append(attr)
    return attrs


def read_persisted_previous(entity: Any, connection: Connection) -> dict[str, Any]:
    """Read the stored values of columns that were set while expired or unloaded.

    Call from before_update, while the row still holds the old values. Returns
    an empty dict when every changed column already has its prior value.
    """
    state = instance_state(entity)
    if state is None or not state.identity:
        return {}
    attrs = _unloaded_changes(state)
    if not attrs:
        return {}
    mapper = state.mapper
    stmt = select(*(attr.columns[0] for attr in attrs)).where(
        *(column == value for column, value in zip(mapper.primary_key, state.identity))
    )
    row = connection.execute(stmt).first()
    if row is None:
        return {}
    return {attr.key: value for attr, value in zip(attrs, row)}


def previous_fields(
    entity: Any, persisted: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Rebuild the pre-flush field values of a mapped instance from attribute history.

    Must run before the session resets history (after_update is fine).
    Attributes changed without their prior value loaded come from persisted
    (see read_persisted_previous); without it they are omitted.
    """
    state = instance_state(entity)
    if state is None:
        return loaded_fields(entity)
    persisted = persisted or {}
    fields: dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        if attr.key not in state.dict:
            continue
        history = state.attrs[attr.key].history
        if history.deleted:
            fields[attr.key] = history.deleted[0]
        elif history.unchanged:
            fields[attr.key] = history.unchanged[0]
        elif not history.added:
            fields[attr.key] = state.dict[attr.key]
        elif attr.key in persisted:
            fields[attr.key] = persisted[attr.key]
    for rel in state.mapper.relationships:
        if rel.key not in state.dict:
            continue
        history = state.attrs[rel.key].history
        if rel.uselist:
            before = list(history.unchanged or ()) + list(history.deleted or ())
            fields[rel.key] = _collapse_related(before)
        elif history.deleted:
            previous = history.deleted[0]
            fields[rel.key] = None if previous is None else _collapse_related(previous)
        elif history.unchanged:
            fields[rel.key] = _collapse_related(history.unchanged[0])
    return fields


def entity_id_of(entity: Any) -> str | None:
    """Primary key of an entity (mapped, mapping, or plain object) as a string."""
    state = instance_state(entity)
    if state is not None:
        value = loaded_id(entity)
    elif isinstance(entity, Mapping):
        value = entity.get("id")
    else:
        value = getattr(entity, "id", None)
    return None if value is None else str(value)
