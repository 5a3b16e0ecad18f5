"""HTTP middleware. Applied in main app; order matters (last added = outermost)."""

from app.middleware.actor_context import ActorContextMiddleware

__all__ = [
    "ActorContextMiddleware",
]
