"""Establishment ORM model (branch of a company; issues SRI series)."""

from sqlalchemy import Boolean, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.company import Company
from app.infrastructure.persistence.models.mixins import CompanyScopedModel


class Establishment(CompanyScopedModel, Base):
    """Establishment (company branch)."""

    __tablename__ = "establishments"

    name: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    series: Mapped[str] = mapped_column(
        String(3), nullable=False, default="001", server_default="001"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True)

    company: Mapped[Company] = relationship(Company)
