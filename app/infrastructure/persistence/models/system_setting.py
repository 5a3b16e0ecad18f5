"""SystemSetting ORM model: per-company key/value configuration."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base

SYSTEM_TIMEZONE_KEY = "SYSTEM_TIMEZONE"
SYSTEM_CURRENCY_KEY = "SYSTEM_CURRENCY"


class SystemSetting(Base):
    """Company setting. Primary key (company_id, key). Never audited."""

    __tablename__ = "system_settings"

    company_id: Mapped[str] = mapped_column(
        String, ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True
    )
    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
