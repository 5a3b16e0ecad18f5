"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (telemetry, audit
writer and its ORM listeners, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.application.services.timezone_localizer import TimezoneResolver
from app.core.config import Settings, get_settings
from app.infrastructure.audit import AuditEventBridge, ChangeInterceptor
from app.infrastructure.persistence.database import (
    dispose_engine,
    get_engine,
    get_session_factory,
)
from app.infrastructure.services.audit_record_writer import (
    AuditRecordWriter,
    SqlAuditLogStore,
    SqlTenantTimezoneLookup,
)
from app.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


def build_audit_writer(settings: Settings) -> AuditRecordWriter:
    """Wire the audit writer to the SQL store and the system_settings timezone lookup."""
    session_factory = get_session_factory()
    return AuditRecordWriter(
        SqlAuditLogStore(session_factory, settings.audit_default_timezone),
        TimezoneResolver(
            SqlTenantTimezoneLookup(session_factory),
            default_timezone=settings.audit_default_timezone,
            timeout_seconds=settings.audit_timezone_lookup_timeout_seconds,
        ),
        max_queue_size=settings.audit_queue_max_size,
        workers=settings.audit_writer_workers,
        drain_timeout_seconds=settings.audit_drain_timeout_seconds,
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), audit writer, audit listeners.
    Shutdown order: listeners detach, writer drain/stop, telemetry
    shutdown, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_sqlalchemy(get_engine())
        logger.info("Telemetry initialized")

    app.state.audit_writer = None
    app.state.audit_bridge = None
    if settings.audit_enabled:
        writer = build_audit_writer(settings)
        writer.start()
        bridge = AuditEventBridge(ChangeInterceptor(writer))
        bridge.attach()
        app.state.audit_writer = writer
        app.state.audit_bridge = bridge
    else:
        logger.warning("Audit trail disabled (AUDIT_ENABLED=false)")

    yield

    # ---- Shutdown ----
    # Detach first so no new entries arrive while the queue drains.
    if app.state.audit_bridge is not None:
        app.state.audit_bridge.detach()
        app.state.audit_bridge = None
    if app.state.audit_writer is not None:
        await app.state.audit_writer.stop()
        app.state.audit_writer = None

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    await dispose_engine()
    logger.info("Database engine disposed")
