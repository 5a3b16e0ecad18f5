"""Tests for actor context propagation and token claim mapping."""

import asyncio

from app.middleware.actor_context import actor_kwargs_from_claims
from app.shared.context import (
    SYSTEM_CONTEXT,
    actor_scope,
    get_actor_context,
    get_current_actor_id,
)
from app.shared.enums import ActorType


def test_system_context_outside_any_scope() -> None:
    assert get_current_actor_id() is None
    assert get_actor_context().actor_type == ActorType.SYSTEM
    assert get_actor_context() is SYSTEM_CONTEXT


def test_scope_sets_and_restores() -> None:
    with actor_scope("u1", role="owner", company_id="c1") as ctx:
        assert get_current_actor_id() == "u1"
        assert ctx.actor_type == ActorType.USER
        assert ctx.role == "owner"
        assert ctx.company_id == "c1"
    assert get_current_actor_id() is None


def test_nested_scopes_restore_outer() -> None:
    with actor_scope("outer"):
        with actor_scope("inner"):
            assert get_current_actor_id() == "inner"
        assert get_current_actor_id() == "outer"


def test_blank_user_is_system() -> None:
    with actor_scope("") as ctx:
        assert ctx is SYSTEM_CONTEXT
        assert get_current_actor_id() is None


def test_scope_is_restored_after_error() -> None:
    try:
        with actor_scope("u1"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert get_current_actor_id() is None


async def test_spawned_tasks_inherit_actor() -> None:
    async def who() -> str | None:
        await asyncio.sleep(0)
        return get_current_actor_id()

    with actor_scope("u1"):
        task = asyncio.create_task(who())
    assert await task == "u1"


async def test_concurrent_scopes_do_not_leak() -> None:
    async def run_as(user_id: str) -> str | None:
        with actor_scope(user_id):
            await asyncio.sleep(0.01)
            return get_current_actor_id()

    results = await asyncio.gather(*(run_as(f"u{i}") for i in range(10)))
    assert results == [f"u{i}" for i in range(10)]


def test_claims_mapping() -> None:
    kwargs = actor_kwargs_from_claims(
        {"sub": "u1", "role": "OWNER", "companyId": "c1", "exp": 1}
    )
    assert kwargs == {
        "user_id": "u1",
        "role": "owner",
        "company_id": "c1",
        "is_super_admin": False,
    }


def test_claims_super_admin() -> None:
    assert actor_kwargs_from_claims({"sub": "u1", "isSuperAdmin": True})["is_super_admin"]
    assert actor_kwargs_from_claims({"sub": "u1", "role": "super_admin"})["is_super_admin"]
    assert not actor_kwargs_from_claims({"sub": "u1", "isSuperAdmin": "yes"})[
        "is_super_admin"
    ]


def test_claims_snake_case_company_and_missing_claims() -> None:
    assert actor_kwargs_from_claims({"sub": 7, "company_id": "c2"})["company_id"] == "c2"
    assert actor_kwargs_from_claims({"sub": 7})["user_id"] == "7"
    assert actor_kwargs_from_claims(None) == {"user_id": None}
