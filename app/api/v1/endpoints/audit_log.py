"""Audit log API: who changed which business record, and how."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_audit_log_query_service, require_audit_admin
from app.infrastructure.services.audit_log_query_service import (
    AuditLogQueryService,
    parse_int_param,
)
from app.schemas.audit_log import (
    AuditLogCompanyListResponse,
    AuditLogEntryResponse,
    AuditLogListResponse,
)
from app.shared.context import ActorContext

router = APIRouter()

# Unparsable values fall back to the defaults; out-of-range values are
# clamped by the service.
PageQuery = Annotated[str | None, Query(description="Page number (1-based)")]
LimitQuery = Annotated[str | None, Query(description="Page size, 1-100")]


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    service: Annotated[AuditLogQueryService, Depends(get_audit_log_query_service)],
    _: Annotated[ActorContext, Depends(require_audit_admin)],
    company_id: Annotated[
        str | None, Query(alias="companyId", description="Filter by company")
    ] = None,
    page: PageQuery = None,
    limit: LimitQuery = None,
) -> AuditLogListResponse:
    """List audit entries, newest first, optionally for one company."""
    result = await service.list(
        company_id, parse_int_param(page), parse_int_param(limit)
    )
    return AuditLogListResponse(
        data=[AuditLogEntryResponse.model_validate(e) for e in result.items],
        total=result.total,
    )


@router.get("/company/{company_id}", response_model=AuditLogCompanyListResponse)
async def list_company_audit_logs(
    company_id: str,
    service: Annotated[AuditLogQueryService, Depends(get_audit_log_query_service)],
    _: Annotated[ActorContext, Depends(require_audit_admin)],
    page: PageQuery = None,
    limit: LimitQuery = None,
) -> AuditLogCompanyListResponse:
    """List one company's audit entries with page metadata."""
    result = await service.list_by_company(
        company_id, parse_int_param(page), parse_int_param(limit)
    )
    return AuditLogCompanyListResponse(
        data=[AuditLogEntryResponse.model_validate(e) for e in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/{audit_log_id}", response_model=AuditLogEntryResponse)
async def get_audit_log(
    audit_log_id: str,
    service: Annotated[AuditLogQueryService, Depends(get_audit_log_query_service)],
    _: Annotated[ActorContext, Depends(require_audit_admin)],
) -> AuditLogEntryResponse:
    """Return one audit entry (404 if it does not exist)."""
    return AuditLogEntryResponse.model_validate(await service.find_one(audit_log_id))
