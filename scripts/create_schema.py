"""Create all tables from the ORM metadata (development and test databases).

Usage:
    python -m scripts.create_schema

Requires: DATABASE_URL (Postgres) in environment or .env. Existing tables
are left untouched.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from app.domain.exceptions import SqlNotConfiguredException

from app.infrastructure.persistence import database as db_mod
from app.infrastructure.persistence import models  # noqa: F401  (registers tables)
from app.infrastructure.persistence.database import Base, dispose_engine


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


async def run() -> None:
    load_dotenv(_project_root() / ".env", override=True)
    try:
        engine = db_mod.get_engine()
    except SqlNotConfiguredException:
        print("Database not configured. Set DATABASE_URL.", file=sys.stderr)
        sys.exit(1)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    for table in Base.metadata.sorted_tables:
        print(f"  {table.name}")
    await dispose_engine()
    print("Schema ready.")


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
