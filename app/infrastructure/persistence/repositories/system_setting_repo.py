"""System setting repository (read-only key/value lookups per company)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.system_setting import (
    SYSTEM_TIMEZONE_KEY,
    SystemSetting,
)


class SystemSettingRepository:
    """Reads company settings. Implements ITenantTimezoneLookup."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_value(self, company_id: str, key: str) -> str | None:
        """Return the raw value of key for company, or None."""
        result = await self.db.execute(
            select(SystemSetting.value).where(
                SystemSetting.company_id == company_id,
                SystemSetting.key == key,
            )
        )
        return result.scalar_one_or_none()

    async def get_timezone_value(self, company_id: str) -> str | None:
        """Return the configured timezone for company (unvalidated), or None."""
        return await self.get_value(company_id, SYSTEM_TIMEZONE_KEY)
