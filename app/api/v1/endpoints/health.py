"""Health check endpoint. No database access; used for liveness probes."""

from fastapi import APIRouter, Request

from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok plus the audit writer state."""
    writer = getattr(request.app.state, "audit_writer", None)
    if writer is None:
        state = "disabled"
    else:
        state = "running" if writer.running else "stopped"
    return HealthResponse(audit_writer=state)
