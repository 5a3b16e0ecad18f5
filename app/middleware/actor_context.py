"""Actor context middleware.

Decodes the bearer token and runs the request inside actor_scope so that
every change made while handling it is attributed to that principal.
Requests without a valid token run as the system actor; routes that need
a principal enforce it themselves (see require_audit_admin).
"""

from __future__ import annotations

from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.infrastructure.security.jwt import verify_token
from app.shared.context import actor_scope
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

SUPER_ADMIN_ROLE = "super_admin"


def _claims_from_request(request: Request) -> dict[str, Any] | None:
    """Return verified JWT claims from the Authorization header, or None."""
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        return None
    try:
        return verify_token(auth[7:].strip())
    except ValueError as e:
        logger.debug("Ignoring invalid bearer token: %s", e)
        return None


def actor_kwargs_from_claims(claims: dict[str, Any] | None) -> dict[str, Any]:
    """Map token claims to actor_scope arguments."""
    if not claims:
        return {"user_id": None}
    role = claims.get("role")
    role = str(role).lower() if role else None
    company_id = claims.get("companyId") or claims.get("company_id")
    return {
        "user_id": str(claims["sub"]),
        "role": role,
        "company_id": str(company_id) if company_id else None,
        "is_super_admin": claims.get("isSuperAdmin") is True
        or role == SUPER_ADMIN_ROLE,
    }


def ActorContextMiddleware(app: Callable) -> Callable:
    """Establish the actor context (from JWT) before the route runs."""

    class _Middleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next: Callable) -> Response:
            kwargs = actor_kwargs_from_claims(_claims_from_request(request))
            user_id = kwargs.pop("user_id")
            with actor_scope(user_id, **kwargs):
                return await call_next(request)

    return _Middleware(app)
