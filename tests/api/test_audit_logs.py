"""Audit log API: authentication, admin guard, pagination and error mapping."""

from collections.abc import Callable
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from app.api.v1.dependencies import get_audit_log_query_service
from app.application.dtos.audit_log import AuditLogResult, PerformedByUser
from app.infrastructure.services.audit_log_query_service import AuditLogQueryService
from app.main import app

BASE = "/api/v1/audit-logs"


def _result(id: str = "a1", company_id: str = "company-1") -> AuditLogResult:
    return AuditLogResult(
        id=id,
        entity_name="Establishment",
        entity_id="e1",
        company_id=company_id,
        action="UPDATE",
        performed_by="u1",
        old_values={"phone": "022334455"},
        new_values={"phone": "022999999"},
        created_at=datetime(2025, 3, 1, 17, 4, 5, tzinfo=UTC),
        performed_by_user=PerformedByUser(id="u1", full_name="Ana Torres", email="ana@acme.ec"),
    )


@pytest.fixture
def repo() -> AsyncMock:
    """Repository double behind the real query service."""
    repo = AsyncMock()
    repo.list.return_value = [_result()]
    repo.count.return_value = 45
    repo.get_by_id.return_value = None
    app.dependency_overrides[get_audit_log_query_service] = lambda: AuditLogQueryService(repo)
    return repo


async def test_requires_authentication(client: AsyncClient, repo: AsyncMock) -> None:
    """No bearer token: 401 with WWW-Authenticate."""
    response = await client.get(BASE)
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    assert response.headers.get("www-authenticate") == "Bearer"


async def test_invalid_token_is_unauthenticated(client: AsyncClient, repo: AsyncMock) -> None:
    response = await client.get(BASE, headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_non_admin_role_is_forbidden(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    response = await client.get(BASE, headers=auth_headers(role="seller"))
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"
    repo.list.assert_not_called()


@pytest.mark.parametrize("role", ["admin", "owner", "OWNER"])
async def test_admin_roles_can_list(
    client: AsyncClient,
    repo: AsyncMock,
    auth_headers: Callable[..., dict[str, str]],
    role: str,
) -> None:
    response = await client.get(BASE, headers=auth_headers(role=role))
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 45
    [item] = body["data"]
    assert item["id"] == "a1"
    assert item["new_values"] == {"phone": "022999999"}
    assert item["performed_by_user"] == {
        "id": "u1",
        "full_name": "Ana Torres",
        "email": "ana@acme.ec",
    }


async def test_super_admin_without_role_can_list(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    headers = auth_headers(role=None, company_id=None, is_super_admin=True)
    response = await client.get(BASE, headers=headers)
    assert response.status_code == 200


async def test_list_filters_by_company_query(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    response = await client.get(
        BASE, params={"companyId": "company-1", "page": 2, "limit": 10}, headers=auth_headers()
    )
    assert response.status_code == 200
    repo.list.assert_awaited_once_with(company_id="company-1", skip=10, limit=10)
    repo.count.assert_awaited_once_with(company_id="company-1")


async def test_out_of_range_paging_is_clamped(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    response = await client.get(
        BASE, params={"page": 0, "limit": 1000}, headers=auth_headers()
    )
    assert response.status_code == 200
    repo.list.assert_awaited_once_with(company_id=None, skip=0, limit=100)


async def test_company_listing_has_page_metadata(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    response = await client.get(
        f"{BASE}/company/company-1", params={"page": 1, "limit": 20}, headers=auth_headers()
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 45
    assert body["page"] == 1
    assert body["limit"] == 20
    assert body["totalPages"] == 3
    assert len(body["data"]) == 1


async def test_company_listing_blank_company_is_400(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    response = await client.get(f"{BASE}/company/%20", headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_get_one(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    repo.get_by_id.return_value = _result("a7")
    response = await client.get(f"{BASE}/a7", headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["id"] == "a7"


async def test_get_one_not_found(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    response = await client.get(f"{BASE}/missing", headers=auth_headers())
    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "RESOURCE_NOT_FOUND"
    assert body["details"]["resource_id"] == "missing"


async def test_non_integer_paging_uses_defaults(
    client: AsyncClient, repo: AsyncMock, auth_headers: Callable[..., dict[str, str]]
) -> None:
    repo.list.return_value = []
    repo.count.return_value = 0
    response = await client.get(
        BASE, params={"page": "abc", "limit": "ten"}, headers=auth_headers()
    )
    assert response.status_code == 200
    repo.list.assert_awaited_once_with(company_id=None, skip=0, limit=20)
