"""Tax ORM model (IVA and other rates configured per company)."""

from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.company import Company
from app.infrastructure.persistence.models.mixins import CompanyScopedModel


class Tax(CompanyScopedModel, Base):
    """Tax rate."""

    __tablename__ = "taxes"

    name: Mapped[str] = mapped_column(String, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    code: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    company: Mapped[Company] = relationship(Company)
