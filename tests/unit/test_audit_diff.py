"""Tests for the audit diff engine (sanitize, diff, pick_old_values, to_jsonable)."""

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from types import SimpleNamespace
from uuid import UUID

from app.application.services.audit_diff import (
    canonicalize,
    diff,
    pick_old_values,
    sanitize,
    to_jsonable,
)


class Color(Enum):
    RED = "red"


class TestSanitize:
    """Secrets, volatile timestamps and private keys never reach an audit record."""

    def test_drops_credentials(self) -> None:
        out = sanitize({
            "email": "a@b.ec",
            "password": "x",
            "password_hash": "$2b$...",
            "api_key": "k",
            "refresh_token": "t",
        })
        assert out == {"email": "a@b.ec"}

    def test_drops_volatile_and_private_keys(self) -> None:
        now = datetime.now(UTC)
        out = sanitize({
            "name": "Matriz",
            "created_at": now,
            "updatedAt": now,
            "deleted_at": None,
            "_sa_instance_state": object(),
        })
        assert out == {"name": "Matriz"}

    def test_collapses_references_to_id(self) -> None:
        company = SimpleNamespace(id="c1", name="ACME", ruc_nit="1790000000001")
        out = sanitize({"company": company, "establishment": {"id": "e1", "name": "X"}})
        assert out == {"company": {"id": "c1"}, "establishment": {"id": "e1"}}

    def test_collapses_reference_collections(self) -> None:
        points = [SimpleNamespace(id="p1"), {"id": "p2", "code": "002"}]
        assert sanitize({"emission_points": points}) == {
            "emission_points": [{"id": "p1"}, {"id": "p2"}]
        }

    def test_keeps_scalar_lists_and_plain_mappings(self) -> None:
        out = sanitize({"tags": ["a", "b"], "meta": {"k": 1}, "amount": Decimal("1.50")})
        assert out == {"tags": ["a", "b"], "meta": {"k": 1}, "amount": Decimal("1.50")}

    def test_none_and_plain_object(self) -> None:
        assert sanitize(None) is None
        assert sanitize(SimpleNamespace(name="n", password="p")) == {"name": "n"}


class TestDiff:
    """Only changed fields are reported, carrying the new value."""

    def test_single_field_change(self) -> None:
        old = {"phone": "022334455", "name": "Matriz"}
        new = {"phone": "022999999", "name": "Matriz"}
        assert diff(old, new) == {"phone": "022999999"}

    def test_no_change_returns_none(self) -> None:
        snap = {"name": "Matriz", "is_active": True}
        assert diff(snap, dict(snap)) is None

    def test_volatile_keys_never_count(self) -> None:
        old = {"name": "x", "updated_at": datetime(2025, 1, 1, tzinfo=UTC)}
        new = {"name": "x", "updated_at": datetime(2025, 6, 1, tzinfo=UTC)}
        assert diff(old, new) is None

    def test_missing_key_equals_none(self) -> None:
        assert diff({"email": None}, {}) is None
        assert diff({}, {"email": "a@b.ec"}) == {"email": "a@b.ec"}
        assert diff({"email": "a@b.ec"}, {}) == {"email": None}

    def test_numeric_representations_are_equal(self) -> None:
        assert diff({"percentage": Decimal("15.00")}, {"percentage": Decimal("15")}) is None
        assert diff({"percentage": 15}, {"percentage": 15.0}) is None
        assert diff({"percentage": Decimal("12.00")}, {"percentage": Decimal("15.00")}) == {
            "percentage": Decimal("15.00")
        }

    def test_datetimes_compared_as_instants(self) -> None:
        utc = datetime(2025, 3, 1, 17, 0, tzinfo=UTC)
        gye = utc.astimezone(timezone(timedelta(hours=-5)))
        assert diff({"subscription_end": utc}, {"subscription_end": gye}) is None

    def test_nested_key_order_ignored(self) -> None:
        assert diff({"meta": {"a": 1, "b": 2}}, {"meta": {"b": 2, "a": 1}}) is None

    def test_enum_compared_by_value(self) -> None:
        assert diff({"color": Color.RED}, {"color": "red"}) is None

    def test_bool_is_not_a_number(self) -> None:
        assert diff({"is_active": True}, {"is_active": 1}) == {"is_active": 1}

    def test_old_and_new_share_key_set(self) -> None:
        old = {"phone": "1", "email": "a@b.ec", "name": "n"}
        new = {"phone": "2", "email": "c@d.ec", "name": "n"}
        changed = diff(old, new)
        assert changed is not None
        assert set(pick_old_values(old, changed)) == set(changed) == {"phone", "email"}


def test_pick_old_values() -> None:
    old = {"phone": "022334455", "name": "Matriz"}
    assert pick_old_values(old, {"phone": "022999999"}) == {"phone": "022334455"}
    assert pick_old_values(None, {"phone": "x"}) == {"phone": None}


def test_canonicalize_is_order_free_for_sets() -> None:
    assert canonicalize({"b", "a"}) == canonicalize({"a", "b"})


def test_to_jsonable() -> None:
    uid = UUID("12345678-1234-5678-1234-567812345678")
    out = to_jsonable({
        "percentage": Decimal("15.00"),
        "uid": uid,
        "color": Color.RED,
        "start": date(2025, 1, 31),
        "tags": {"b"},
        "pair": (1, 2),
        "nested": {"n": Decimal("1")},
    })
    assert out == {
        "percentage": "15.00",
        "uid": str(uid),
        "color": "red",
        "start": "2025-01-31",
        "tags": ["b"],
        "pair": [1, 2],
        "nested": {"n": "1"},
    }
