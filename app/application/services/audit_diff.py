"""Diff engine for audit snapshots (sanitize, canonical compare, JSON-safe values).

Pure functions over plain mappings. ORM instances are turned into mappings by
the infrastructure snapshot helpers before they reach this module; any other
object exposing ``__dict__`` is read through ``vars()``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from app.shared.utils.datetime import ensure_utc

SECRET_KEYS = frozenset({
    "password",
    "password_hash",
    "hashed_password",
    "passwordHash",
    "secret",
    "api_key",
    "apiKey",
    "token",
    "access_token",
    "refresh_token",
    "client_secret",
    "credentials",
})

VOLATILE_KEYS = frozenset({
    "created_at",
    "updated_at",
    "deleted_at",
    "createdAt",
    "updatedAt",
    "deletedAt",
})

_SCALAR_TYPES = (str, bytes, int, float, bool, Decimal, date, time, UUID, Enum)


def _relation_id(value: Any) -> tuple[bool, Any]:
    """Return (True, id) when value looks like a reference to another record."""
    if isinstance(value, Mapping):
        if "id" in value:
            return True, value["id"]
        return False, None
    if value is None or isinstance(value, _SCALAR_TYPES):
        return False, None
    if hasattr(value, "id"):
        return True, value.id
    return False, None


def _collapse(value: Any) -> Any:
    is_ref, ref_id = _relation_id(value)
    if is_ref:
        return {"id": ref_id}
    if isinstance(value, list | tuple) and value:
        collapsed = [_relation_id(item) for item in value]
        if all(is_ref for is_ref, _ in collapsed):
            return [{"id": ref_id} for _, ref_id in collapsed]
    return value


def _as_mapping(raw: Any) -> Mapping[str, Any] | None:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return raw
    if hasattr(raw, "__dict__"):
        return vars(raw)
    return None


def sanitize(raw: Any) -> dict[str, Any] | None:
    """Return an audit-safe copy of an entity snapshot.

    Drops credential keys, volatile timestamps and private (``_``-prefixed)
    keys, and collapses references to other records into ``{"id": ...}``
    (collections of references into lists of them).

    Args:
        raw: Mapping or plain object with the entity's field values.

    Returns:
        New dict, or None when raw is None or not readable.
    """
    source = _as_mapping(raw)
    if source is None:
        return None
    result: dict[str, Any] = {}
    for key, value in source.items():
        name = str(key)
        if name.startswith("_") or name in SECRET_KEYS or name in VOLATILE_KEYS:
            continue
        result[name] = _collapse(value)
    return result


def _canonical(value: Any) -> Any:
    if value is None or isinstance(value, bool | str):
        return value
    if isinstance(value, Enum):
        return _canonical(value.value)
    if isinstance(value, int | float | Decimal):
        # 5, 5.0 and Decimal("5.00") compare equal
        return {"$n": format(Decimal(str(value)).normalize(), "f")}
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat()
    if isinstance(value, date | time):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Mapping):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, set | frozenset):
        items = [_canonical(v) for v in value]
        return sorted(items, key=lambda v: json.dumps(v, sort_keys=True))
    if isinstance(value, list | tuple):
        return [_canonical(v) for v in value]
    return str(value)


def canonicalize(value: Any) -> str:
    """Deterministic JSON rendering used for value equality."""
    return json.dumps(_canonical(value), sort_keys=True, separators=(",", ":"))


def diff(
    old: Mapping[str, Any] | None, new: Mapping[str, Any] | None
) -> dict[str, Any] | None:
    """Return the fields whose value changed, carrying the new value.

    A key missing on one side counts as None. Volatile timestamps never
    count as a change.

    Returns:
        Dict of changed fields to new values, or None if nothing changed.
    """
    old = old or {}
    new = new or {}
    keys = list(new.keys()) + [k for k in old.keys() if k not in new]
    changed: dict[str, Any] = {}
    for key in keys:
        if key in VOLATILE_KEYS:
            continue
        if canonicalize(old.get(key)) != canonicalize(new.get(key)):
            changed[key] = new.get(key)
    return changed or None


def pick_old_values(
    old: Mapping[str, Any] | None, changed: Mapping[str, Any]
) -> dict[str, Any]:
    """Prior values for exactly the keys in changed."""
    old = old or {}
    return {key: old.get(key) for key in changed}


def to_jsonable(value: Any) -> Any:
    """Make a snapshot value safe for a JSON column."""
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if isinstance(value, Decimal | UUID):
        return str(value)
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, set | frozenset):
        return sorted((to_jsonable(v) for v in value), key=str)
    if isinstance(value, list | tuple):
        return [to_jsonable(v) for v in value]
    return str(value)
