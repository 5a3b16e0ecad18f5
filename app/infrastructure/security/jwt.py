"""Bearer token verification.

Tokens are issued by the auth service with the claims ``sub``, ``role``,
``companyId`` and ``isSuperAdmin``; this backend only verifies them.
create_access_token mints tokens of the same shape for service calls and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings


def create_access_token(
    subject: str,
    *,
    role: str | None = None,
    company_id: str | None = None,
    is_super_admin: bool = False,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed token carrying the auth service's claims.

    Args:
        subject: User id (``sub``).
        role: Role claim (e.g. 'owner', 'admin', 'seller'); omitted when None.
        company_id: Selected company (``companyId``); omitted when None.
        is_super_admin: Sets ``isSuperAdmin: true`` when True.
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims: dict[str, Any] = {"sub": subject, "exp": datetime.now(UTC) + ttl}
    if role is not None:
        claims["role"] = role
    if company_id is not None:
        claims["companyId"] = company_id
    if is_super_admin:
        claims["isSuperAdmin"] = True
    return cast(
        str,
        jwt.encode(
            claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm
        ),
    )


def verify_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry; return the claims.

    Raises:
        ValueError: If the token is invalid, expired, or has no subject.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not claims.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return claims
