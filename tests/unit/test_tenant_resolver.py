"""Tests for TenantResolver (ordered strategies over ORM instances, objects, mappings)."""

from types import SimpleNamespace

from app.infrastructure.audit.tenant_resolver import TenantResolver
from app.infrastructure.persistence.models import (
    Company,
    EmissionPoint,
    Establishment,
    User,
    Warehouse,
)

resolver = TenantResolver()


def test_company_is_its_own_tenant() -> None:
    assert resolver.resolve(Company(id="c1", name="ACME", ruc_nit="1790000000001")) == "c1"


def test_direct_company_reference() -> None:
    company = Company(id="c1", name="ACME", ruc_nit="1790000000001")
    est = Establishment(id="e1", name="Matriz", address="Quito", company=company)
    assert resolver.resolve(est) == "c1"


def test_direct_reference_wins_over_id_column() -> None:
    company = Company(id="c1", name="ACME", ruc_nit="1790000000001")
    est = Establishment(id="e1", name="Matriz", address="Quito", company_id="c2")
    est.company = company
    assert resolver.resolve(est) == "c1"


def test_nested_reference_through_establishment() -> None:
    company = Company(id="c1", name="ACME", ruc_nit="1790000000001")
    est = Establishment(id="e1", name="Matriz", address="Quito", company=company)
    point = EmissionPoint(id="p1", code="001", name="Caja 1", establishment=est)
    assert resolver.resolve(point) == "c1"


def test_nested_reference_through_parent_id_column() -> None:
    est = Establishment(id="e1", name="Matriz", address="Quito", company_id="c7")
    wh = Warehouse(id="w1", name="Bodega", establishment=est)
    assert resolver.resolve(wh) == "c7"


def test_id_column() -> None:
    user = User(id="u1", full_name="Ana", email="ana@acme.ec", password_hash="x", company_id="c3")
    assert resolver.resolve(user) == "c3"


def test_unloaded_parent_is_a_miss() -> None:
    assert resolver.resolve(Warehouse(id="w1", name="Bodega", establishment_id="e1")) is None


def test_mapping_inputs() -> None:
    assert resolver.resolve({"companyId": "c4"}) == "c4"
    assert resolver.resolve({"tenant": {"id": "t1"}}) == "t1"
    assert resolver.resolve({"tenantId": 42}) == "42"
    assert resolver.resolve({"establishment": {"company": {"id": "c5"}}}) == "c5"


def test_field_scan_is_last_resort() -> None:
    entity = SimpleNamespace(id="x1", owner_company_ref="c6")
    assert resolver.resolve(entity) == "c6"


def test_total_miss_returns_none() -> None:
    assert resolver.resolve(SimpleNamespace(id="x1", name="n")) is None
    assert resolver.resolve({}) is None
    assert resolver.resolve(None) is None


def test_blank_ids_are_misses() -> None:
    assert resolver.resolve({"company_id": "", "company": {"id": None}}) is None


def test_resolve_is_idempotent() -> None:
    est = Establishment(id="e1", name="Matriz", address="Quito", company_id="c1")
    assert resolver.resolve(est) == resolver.resolve(est) == "c1"


def test_resolve_for_update_falls_back_to_before() -> None:
    after = SimpleNamespace(id="x1", name="new")
    assert resolver.resolve_for_update(after, {"company_id": "c1"}) == "c1"
    assert resolver.resolve_for_update({"company_id": "c2"}, {"company_id": "c1"}) == "c2"
