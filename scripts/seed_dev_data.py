"""Seed a development company and exercise the audit trail end to end.

Creates a company with its timezone setting, an establishment, an emission
point and a tax, then raises the tax rate. Runs with the audit writer and
ORM listeners attached, so audit_logs receives CREATE and UPDATE rows
rendered in the company's timezone.

Usage:
    python -m scripts.seed_dev_data [TIMEZONE]

Default timezone: America/Guayaquil. Requires: DATABASE_URL (Postgres) and
the schema (python -m scripts.create_schema).
"""

from __future__ import annotations

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import select

from app.core.config import get_settings
from app.core.lifespan import build_audit_writer
from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.audit import AuditEventBridge, ChangeInterceptor
from app.infrastructure.persistence import database as db_mod
from app.infrastructure.persistence.models import (
    Company,
    EmissionPoint,
    Establishment,
    SystemSetting,
    Tax,
)
from app.infrastructure.persistence.models.system_setting import SYSTEM_TIMEZONE_KEY
from app.shared.context import actor_scope
from app.shared.utils.generators import generate_cuid

DEV_RUC = "1790000000001"


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


async def run(timezone: str) -> None:
    load_dotenv(_project_root() / ".env", override=True)
    get_settings.cache_clear()
    settings = get_settings()
    try:
        session_factory = db_mod.get_session_factory()
    except SqlNotConfiguredException:
        print("Database not configured. Set DATABASE_URL.", file=sys.stderr)
        sys.exit(1)

    writer = build_audit_writer(settings)
    writer.start()
    bridge = AuditEventBridge(ChangeInterceptor(writer))
    bridge.attach()
    try:
        with actor_scope(None):
            async with session_factory() as session:
                async with session.begin():
                    existing = await session.scalar(
                        select(Company).where(Company.ruc_nit == DEV_RUC)
                    )
                    if existing is not None:
                        print(f"Company {DEV_RUC} already exists ({existing.id}), skip")
                        return
                    company = Company(
                        id=generate_cuid(), name="Comercial Dev S.A.", ruc_nit=DEV_RUC
                    )
                    session.add(company)
                    await session.flush()
                    establishment = Establishment(
                        name="Matriz", address="Av. Amazonas N24", company=company
                    )
                    tax = Tax(
                        name="IVA", percentage=Decimal("12.00"), code="2", company=company
                    )
                    session.add_all(
                        [
                            SystemSetting(
                                company_id=company.id,
                                key=SYSTEM_TIMEZONE_KEY,
                                value=timezone,
                            ),
                            establishment,
                            EmissionPoint(code="001", name="Caja 1", establishment=establishment),
                            tax,
                        ]
                    )
                print(f"Company {company.name} -> {company.id} ({timezone})")

                async with session.begin():
                    tax.percentage = Decimal("15.00")
                print(f"  Tax {tax.name} -> {tax.percentage}%")
    finally:
        bridge.detach()
        await writer.stop()
        await db_mod.dispose_engine()
    print(f"Seed completed. Audit writer: {writer.stats.as_dict()}")


def main() -> None:
    timezone = sys.argv[1] if len(sys.argv) > 1 else "America/Guayaquil"
    asyncio.run(run(timezone))


if __name__ == "__main__":
    main()
