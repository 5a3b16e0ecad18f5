"""Request context management using contextvars.

Provides async-safe storage for the acting principal of one unit of work
(HTTP request or background job). The context is a single immutable value
held in a ContextVar: it is copied into tasks spawned from the request and
never shared between concurrent requests.

Usage:
    with actor_scope(user_id="user123", role="admin"):
        ...  # anything audited here is attributed to user123
    get_current_actor_id()  # None outside any scope (system)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from app.shared.enums import ActorType


@dataclass(frozen=True)
class ActorContext:
    """Immutable snapshot of the current actor context."""

    user_id: str | None
    actor_type: ActorType
    role: str | None = None
    company_id: str | None = None
    is_super_admin: bool = False


SYSTEM_CONTEXT = ActorContext(user_id=None, actor_type=ActorType.SYSTEM)

_current_actor: ContextVar[ActorContext | None] = ContextVar(
    "current_actor", default=None
)


def _build_context(
    user_id: str | None,
    role: str | None,
    company_id: str | None,
    is_super_admin: bool,
) -> ActorContext:
    if not user_id:
        return SYSTEM_CONTEXT
    return ActorContext(
        user_id=user_id,
        actor_type=ActorType.USER,
        role=role,
        company_id=company_id,
        is_super_admin=is_super_admin,
    )


@contextmanager
def actor_scope(
    user_id: str | None = None,
    *,
    role: str | None = None,
    company_id: str | None = None,
    is_super_admin: bool = False,
) -> Iterator[ActorContext]:
    """Run a block as the given principal; restore the previous context on exit.

    Call once at the entry of a unit of work (middleware, job runner).
    A falsy user_id establishes the system context.

    Args:
        user_id: Authenticated principal id, or None for system work.
        role: Principal role claim (e.g. 'owner', 'admin', 'seller').
        company_id: Company selected in the token, if any.
        is_super_admin: Whether the principal bypasses company scoping.

    Yields:
        The ActorContext active inside the block.
    """
    context = _build_context(user_id, role, company_id, is_super_admin)
    token = _current_actor.set(context)
    try:
        yield context
    finally:
        _current_actor.reset(token)


def get_actor_context() -> ActorContext:
    """Return the current actor context (system context when none is active)."""
    return _current_actor.get() or SYSTEM_CONTEXT


def get_current_actor_id() -> str | None:
    """Return the current principal id, or None when acting as system."""
    context = _current_actor.get()
    return context.user_id if context is not None else None
